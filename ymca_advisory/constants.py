"""
Global constants for the scoring engine and advisory layer.

Centralizes fixed values shared between scoring, advisors and the cache
so the threshold table and point totals live in exactly one place.
"""

# Scoring
MAX_TOTAL_POINTS = 80  # Operational (40) + financial (40)
CATEGORY_MAX_POINTS = {
    "operational": 40,
    "financial": 40,
}

# Canonical performance-tier boundaries (percent of max points)
MODERATE_TIER_MIN_PERCENT = 40  # 40-69 -> moderate
HIGH_TIER_MIN_PERCENT = 70  # >=70 -> high

# Support designations
DESIGNATION_YUSA_SUPPORT = "Y-USA Support"
DESIGNATION_INDEPENDENT_IMPROVEMENT = "Independent Improvement"

# Completion service
DEFAULT_API_VERSION = "2024-02-15-preview"
DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.3
COMPLETION_TIMEOUT_SECONDS = 60  # Per-call bound, timeout counts as transport failure

# Analysis cache
CACHE_TTL_SECONDS = 300  # 5 minutes from insertion
CACHE_KEY_PREFIX = "ymca_"

# Cross-cutting theme detection
THEME_KEYWORDS = [
    "leadership",
    "culture",
    "processes",
    "communication",
    "training",
    "resources",
]
THEME_MIN_FREQUENCY = 2  # Mentioned by at least two advisors
THEME_HIGH_PRIORITY_FREQUENCY = 3
