"""AfterShip package tracking narrator for voice assistants."""

from .app.api import PackageTrackingAPI
from .app.device import DeviceContext
from .service import TrackingSkillService

__version__ = "1.0.0"

__all__ = ["DeviceContext", "PackageTrackingAPI", "TrackingSkillService"]
