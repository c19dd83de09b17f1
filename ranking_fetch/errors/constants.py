"""Constants for error classification.

Centralizes HTTP status codes and message markers used when mapping raw
failures onto error kinds.
"""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_UNAUTHORIZED = 401
HTTP_STATUS_FORBIDDEN = 403
HTTP_STATUS_TOO_MANY_REQUESTS = 429
HTTP_STATUS_SERVER_ERROR_MIN = 500

# Error body produced by the ranking API for rejected query parameters
WRONG_PARAMETER_ERROR = "wrong_parameter"
ERROR_FIELD = "error"
ERROR_DESCRIPTION_FIELD = "error_description"

# Parameter names that select the ranking slice (genre, demographic, period)
PAGE_PARAMETER_NAMES = ("page",)
FILTER_PARAMETER_NAMES = (
    "genreId",
    "age",
    "sex",
    "carrier",
    "period",
    "tagId",
)

# Lowercased substrings matched against transport error messages
TIMEOUT_MARKERS = ("timeout", "timed out", "etimedout")
CONNECTION_MARKERS = (
    "econnrefused",
    "econnreset",
    "enotfound",
    "connection refused",
    "connection reset",
    "connect",
)
NETWORK_MARKERS = ("network", "socket", "eai_again", "unreachable")

# Default key holding the item collection in a ranking response
DEFAULT_ITEMS_KEY = "Items"
