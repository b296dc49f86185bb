"""
Prediction Engine Constants

Defines recency weights, probability and confidence thresholds, the anchor
offset table, institute category precedence and cache settings.
All values are deterministic with no AI/ML components.
"""

from enum import Enum
from typing import Dict, List, Tuple

# =============================================================================
# RANK PROJECTION
# =============================================================================

# Recency weights, most recent year first
RECENCY_WEIGHTS: List[float] = [1.0, 0.85, 0.7, 0.55, 0.4]
FALLBACK_RECENCY_WEIGHT = 0.3
MAX_PROJECTION_YEARS = 5

# Momentum only kicks in above this relative year-on-year change
MOMENTUM_THRESHOLD = 0.03
MOMENTUM_DAMPING = 0.5
MOMENTUM_CAP = 0.10

# =============================================================================
# PROBABILITY ESTIMATION
# =============================================================================

PROBABILITY_WITHIN_CUTOFF = 0.98
PROBABILITY_CEILING = 0.90
PROBABILITY_FLOOR = 0.01
PROBABILITY_DECIMALS = 3

# Characteristic decay scale: max(MIN_DECAY_SCALE, projected * DECAY_SCALE_RATIO)
MIN_DECAY_SCALE = 500
DECAY_SCALE_RATIO = 0.25

# =============================================================================
# CONFIDENCE
# =============================================================================

class Confidence(str, Enum):
    """Reliability label attached to a probability estimate."""
    NONE = "none"
    VERY_LOW = "very low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very high"


# Upper bounds (exclusive) on relative standard deviation
DISPERSION_BANDS: List[float] = [0.10, 0.15, 0.20, 0.25]

# Label per dispersion band, last entry is the "else" column
CONFIDENCE_TABLE: Dict[int, List[Confidence]] = {
    4: [Confidence.VERY_HIGH, Confidence.HIGH, Confidence.MEDIUM, Confidence.MEDIUM, Confidence.LOW],
    3: [Confidence.HIGH, Confidence.HIGH, Confidence.MEDIUM, Confidence.LOW, Confidence.LOW],
    2: [Confidence.MEDIUM, Confidence.MEDIUM, Confidence.MEDIUM, Confidence.LOW, Confidence.LOW],
}

# =============================================================================
# MESSAGES
# =============================================================================

NO_HISTORY_MESSAGE = "No historical data available for probability estimation."
UNRELIABLE_MESSAGE = "Limited historical data. Probability estimate is unreliable."
LOW_CONFIDENCE_SUFFIX = " (Confidence in this prediction is low due to limited or inconsistent data.)"

# (minimum probability, message), checked top to bottom
PROBABILITY_MESSAGES: List[Tuple[float, str]] = [
    (0.9, "Excellent chance based on historical trends."),
    (0.75, "Very good chance based on historical trends."),
    (0.6, "Good chance based on historical trends."),
    (0.45, "Reasonable chance, but consider backup options."),
    (0.3, "Moderate chance. Treat as competitive; have safer backups."),
    (0.15, "Chance is somewhat low. Treat as a reach; focus on safer backups."),
    (0.05, "Chance is quite low. Prioritize other options."),
]
FALLBACK_PROBABILITY_MESSAGE = "Very low probability based on historical data. Explore other options."

# =============================================================================
# INSTITUTE CATEGORIES
# =============================================================================

class InstituteCategory(str, Enum):
    """Coarse institute tier, used only for ordering."""
    IIT = "IIT"
    NIT = "NIT"
    IIIT = "IIIT"
    GFTI = "GFTI"
    UNKNOWN = "UNKNOWN"


CATEGORY_PRECEDENCE: Dict[InstituteCategory, int] = {
    InstituteCategory.IIT: 1,
    InstituteCategory.NIT: 2,
    InstituteCategory.IIIT: 3,
    InstituteCategory.GFTI: 4,
    InstituteCategory.UNKNOWN: 5,
}

# Checked in order; IIIT goes first so its long name never falls through to IIT
CATEGORY_NAME_PATTERNS: List[Tuple[InstituteCategory, str, str]] = [
    (InstituteCategory.IIIT, "indian institute of information technology", "iiit"),
    (InstituteCategory.IIT, "indian institute of technology", "iit"),
    (InstituteCategory.NIT, "national institute of technology", "nit"),
]

# =============================================================================
# RANKING CONFIGURATION
# =============================================================================

# (inclusive upper rank, anchor offset); ranks past the last entry use BEYOND_TABLE_OFFSET
ANCHOR_OFFSET_TABLE: List[Tuple[int, int]] = [
    (10000, 1000),
    (20000, 1500),
    (30000, 2200),
    (40000, 2900),
    (50000, 3500),
    (60000, 4000),
    (80000, 5500),
    (100000, 6000),
    (125000, 8500),
    (150000, 10500),
    (180000, 12500),
    (210000, 20000),
]
BEYOND_TABLE_OFFSET = 30000

# Sort key stand-in for a missing closing rank
MISSING_RANK = float("inf")

# =============================================================================
# CACHE
# =============================================================================

CACHE_VERSION = "v4"

FILTER_TTL_WITH_RANK = 1800
FILTER_TTL_WITHOUT_RANK = 3600
SUGGESTION_TTL = 1800
TREND_TTL = 3600
FILTER_OPTIONS_TTL = 86400

# =============================================================================
# DEFAULT VALUES
# =============================================================================

DEFAULT_RESULT_LIMIT = 2000
SUGGESTION_LIMIT = 10
