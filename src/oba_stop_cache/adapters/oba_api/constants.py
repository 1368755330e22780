"""Constants for the OneBusAway REST API adapter.

API Documentation: https://developer.onebusaway.org/api/where
"""

# GET /api/where/stops-for-location.json?lat=&lon=&latSpan=&lonSpan=&key=
STOPS_FOR_LOCATION_PATH = "/api/where/stops-for-location.json"

# HTTP headers
DEFAULT_HEADERS = {
    "Accept": "application/json",
}

# Envelope "code" of a successful response
OBA_SUCCESS_CODE = 200

# Wheelchair boarding values as sent by the server -> normalized value
WHEELCHAIR_BOARDING_MAP = {
    "ACCESSIBLE": "accessible",
    "NOT_ACCESSIBLE": "not_accessible",
    "UNKNOWN": "unknown",
}
