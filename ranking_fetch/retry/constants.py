"""Defaults for retry behavior."""

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_DELAY_MS = 1000
DEFAULT_MAX_DELAY_MS = 30000
DEFAULT_BACKOFF_FACTOR = 2.0

# Jitter perturbs a delay uniformly within +/- this fraction
JITTER_FRACTION = 0.1
