"""Constants for the AfterShip voice narrator."""

# AfterShip API Configuration
AFTERSHIP_API_BASE_URL = "https://api.aftership.com/v4"
AFTERSHIP_API_TRACKINGS_ENDPOINT = "/trackings"
AFTERSHIP_API_COURIERS_ALL_ENDPOINT = "/couriers/all"
AFTERSHIP_TRACKING_FIELDS = (
    "tracking_number,title,slug,tag,last_updated_at,expected_delivery,note,checkpoints"
)

# Google Maps API Configuration
GOOGLE_MAPS_API_BASE_URL = "https://maps.googleapis.com/maps/api"
GOOGLE_MAPS_GEOCODE_ENDPOINT = "/geocode/json"
GOOGLE_MAPS_TIMEZONE_ENDPOINT = "/timezone/json"

# Defaults
DEFAULT_COUNTRY = "United States"
DEFAULT_TIMEZONE = "US/Eastern"
DEFAULT_DAYS_SEARCH = 30  # AfterShip only stores data up to 90 days
DEFAULT_DAYS_PAST_DELIVERED = 1
DEFAULT_TRACKING_COUNT_LIMIT = 20
DEFAULT_SCHEDULE_RATE = 30  # minutes

# Date equivalence tolerance
TOLERANCE_HOUR = "hour"
TOLERANCE_DAY = "day"

# AfterShip tracking status phrases
# https://docs.aftership.com/api/4/delivery-status
STATUS_PHRASES = {
    "InfoReceived": "waiting to be received by the carrier",
    "InTransit": "in transit",
    "AvailableForPickup": "available for pickup",
    "OutForDelivery": "out for delivery",
    "AttemptFail": "failed to be delivered by the carrier",
    "Delivered": "delivered",
    "Exception": "undelivered, returned to sender, or in custom hold",
    "Pending": "pending tracking information being available",
    # Not relevant to AfterShip API
    "ExpectedDelivery": "on the way",
}
EXPECTED_PRESENT_PHRASE = "should arrive"
EXPECTED_PAST_PHRASE = "should have arrived"

# Proactive events
PROACTIVE_EVENT_NAME = "AMAZON.OrderStatus.Updated"
PROACTIVE_EVENT_LOCALE = "en-US"
PROACTIVE_SELLER_NAME = "localizedattribute:sellerName"
ORDER_SHIPPED = "ORDER_SHIPPED"
ORDER_OUT_FOR_DELIVERY = "ORDER_OUT_FOR_DELIVERY"
ORDER_DELIVERED = "ORDER_DELIVERED"

# Persisted attribute keys
ATTR_DEVICE = "device"
ATTR_LOCATION = "location"
ATTR_TIMEZONE = "timezone"
ATTR_LAST_PROACTIVE_EVENT = "lastProactiveEvent"

# Speech output
FOOTNOTE_BREAK = '<break time="1s"/>'

# Messages
ERROR_MESSAGE = '<say-as interpret-as="interjection">Uh oh</say-as>, something went wrong.'
AFTERSHIP_API_KEY_MISSING = (
    "The Aftership API key is not configured. Please check the lambda function settings."
)
DEVICE_LOCATION_NOT_FOUND = (
    "The device location couldn't be determined. Please check the lambda function logs."
)
TIMESTAMP_DEFAULT_TIMEZONE = "All timestamps are defaulted to {default_timezone} timezone."
