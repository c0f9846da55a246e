"""Command line entry point.

Usage:
    aftership-voice [keyword]
    aftership-voice --events [--interval 30]

Examples:
    aftership-voice "from FedEx"
    aftership-voice --timezone America/Chicago delivered
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import timedelta
from typing import List, Optional

import aiohttp

from .app.device import DeviceContext
from .app.exceptions import ConfigurationError, SourceFetchError
from .app.speech import strip_markup
from .config import settings
from .const import AFTERSHIP_API_KEY_MISSING, ERROR_MESSAGE
from .service import TrackingSkillService


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Narrate AfterShip package tracking")
    parser.add_argument("keyword", nargs="?", help="courier, status or free-text filter")
    parser.add_argument("--events", action="store_true", help="print proactive events instead")
    parser.add_argument(
        "--interval", type=int, default=settings.schedule_rate, help="proactive events interval in minutes"
    )
    parser.add_argument("--timezone", default=settings.default_timezone, help="device timezone")
    parser.add_argument("--plain", action="store_true", help="strip speech markup from the output")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    """Run the narrator once and print the result."""
    async with aiohttp.ClientSession() as session:
        service = TrackingSkillService.create(settings, session)
        try:
            service.check_configuration()
        except ConfigurationError:
            print(AFTERSHIP_API_KEY_MISSING)
            return 1

        context = DeviceContext.create(timezone=args.timezone, default_timezone=settings.default_timezone)
        try:
            if args.events:
                events = await service.api.build_proactive_events(timedelta(minutes=args.interval), context)
                print(json.dumps([event.to_dict() for event in events], indent=2))
            else:
                speech = await service.api.build_narrative(args.keyword, context)
                print(strip_markup(speech) if args.plain else speech)
        except SourceFetchError as err:
            logging.getLogger(__name__).error("%s", err)
            print(strip_markup(ERROR_MESSAGE))
            return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Console script entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
