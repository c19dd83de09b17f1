"""Constants for the ranking API page source."""

DEFAULT_RANKING_ENDPOINT = (
    "https://app.rakuten.co.jp/services/api/IchibaItem/Ranking/20220601"
)
DEFAULT_USER_AGENT = "ranking-fetch/0.1"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Response layout
DEFAULT_ITEM_WRAPPER_KEY = "Item"
DEFAULT_TOTAL_COUNT_KEY = "count"

# Query parameters
APPLICATION_ID_PARAM = "applicationId"
AFFILIATE_ID_PARAM = "affiliateId"
PAGE_PARAM = "page"
FORMAT_PARAM = "format"
RESPONSE_FORMAT = "json"
