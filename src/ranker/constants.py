"""Constants for the ranker module."""

# Composite score weighting: throughput matters more than responsiveness
CAPACITY_WEIGHT: float = 0.6
LATENCY_WEIGHT: float = 0.4

# Normalized value used when a batch has zero range for a metric
DEGENERATE_NORMALIZED_VALUE: float = 1.0

# Scale for display scores (0-100)
DISPLAY_SCORE_SCALE: int = 100

# Default number of candidates for top-K listings
DEFAULT_TOP_K: int = 3
