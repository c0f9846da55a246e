"""Speech markup helpers."""

import re

# Supported say-as interpret names
SUPPORTED_SAY_AS = (
    "characters",
    "spell-out",
    "cardinal",
    "number",
    "ordinal",
    "digits",
    "fraction",
    "unit",
    "date",
    "time",
    "telephone",
    "address",
    "interjection",
    "expletive",
)

_ENTITIES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

_UNITS = r"[cmk]?[glm]|(?:sq)?ft|in|mi|yd|lbs?|oz|gal|qt|pt|h|min|m?s"

# Fraction (optionally with a whole part), number glued to a unit, or plain number
_NUMBERS_PATTERN = re.compile(
    r"\b(?:(?P<whole>\d+)[+\s]+)?(?P<fraction>\d+/\d+)\b"
    rf"|\b(?P<quantity>\d+(?:\.\d+)?)(?P<unit>{_UNITS})\b"
    r"|\b(?P<number>\d+)\b"
)
_TAG_PATTERN = re.compile(r"<[^>]+>")


def encode_markup(text: str) -> str:
    """Escape markup reserved characters."""
    for char, entity in _ENTITIES:
        text = text.replace(char, entity)
    return text


def decode_markup(text: str) -> str:
    """Unescape markup entities."""
    for char, entity in reversed(_ENTITIES):
        text = text.replace(entity, char)
    return text


def say_as(text, interpret_as: str) -> str:
    """Wrap text in a say-as tag if the interpretation is supported."""
    if interpret_as not in SUPPORTED_SAY_AS:
        return str(text)
    return f'<say-as interpret-as="{interpret_as}">{text}</say-as>'


def _tag_number(match: re.Match) -> str:
    if match.group("fraction"):
        whole = match.group("whole")
        fraction = match.group("fraction")
        return say_as(f"{whole}+{fraction}" if whole else fraction, "fraction")
    if match.group("unit"):
        return say_as(f"{match.group('quantity')}{match.group('unit')}", "unit")
    return say_as(match.group("number"), "cardinal")


def format_markup(text: str) -> str:
    """Escape text and tag numbers, fractions and units for pronunciation."""
    return _NUMBERS_PATTERN.sub(_tag_number, encode_markup(text))


def strip_markup(text: str) -> str:
    """Remove tags and unescape entities."""
    return decode_markup(_TAG_PATTERN.sub("", text))
