"""Centralized constants for grid construction and trend segmentation."""

# Absolute-price grid tiers: (lower, upper, step, upper_inclusive).
# Tiers are contiguous and half-open except the last one.
PRICE_GRID_TIERS = [
    (0.0, 5.0, 0.25, False),
    (5.0, 20.0, 0.50, False),
    (20.0, 100.0, 1.00, False),
    (100.0, 200.0, 2.00, False),
    (200.0, 2000.0, 4.00, True),
]

# Relative-strength grid: geometric levels around 1.0
RATIO_GROWTH_FACTOR = 1.065
RATIO_GRID_MIN = 0.01
RATIO_GRID_MAX = 2000.0

# Decimal places kept for grid values and computed ratios
GRID_PRECISION = 4

# Hysteresis margin in grid-index units
DEFAULT_THRESHOLD = 3

# Grid steps required past day-zero before a trend is seeded
DEFAULT_SEED_MIN_STEPS = 2

# Version identifier for the grid definitions above.
# Bump when tiers or ratio parameters change so stored segment logs
# remain comparable.
GRID_VERSION = "v1.0"
