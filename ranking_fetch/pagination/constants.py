"""Constants for paginated fetching."""

# One request per second keeps within the ranking API's rate limit
DEFAULT_PACING_DELAY_MS = 1000

# Items per page served by the ranking endpoint
DEFAULT_PAGE_SIZE = 30
