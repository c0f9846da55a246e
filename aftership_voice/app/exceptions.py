"""Errors raised by the tracking narration pipeline."""


class TrackingError(Exception):
    """Base error for package tracking narration."""


class SourceFetchError(TrackingError):
    """Tracking source or courier list request failed."""


class GeocodeError(TrackingError):
    """Address lookup failed."""


class MalformedRecordError(TrackingError):
    """Tracking record is missing required fields."""


class ConfigurationError(TrackingError):
    """Required configuration, such as an API key, is missing."""
