# Trend Analysis Module
#
# Grid alignment and hysteresis trend segmentation.

from .types import (
    AlignedField,
    CloseRecord,
    GridLevel,
    Observation,
    PriceRecord,
    RatioRecord,
    TrendSeed,
    TrendSegment,
    TrendType,
)
from .errors import (
    TrendAnalysisError,
    EmptyInputError,
    NoTrendSeedError,
    DegenerateSeriesError,
    NonFiniteValueError,
    MalformedRecordError,
)
from .grid import (
    QuantizationGrid,
    build_price_grid,
    build_ratio_grid,
    price_grid,
    ratio_grid,
    grid_for_kind,
)
from .aligner import align_value, align_values
from .preprocessor import preprocess_series, preprocess_ratios, PRICE_FIELDS, RATIO_FIELDS
from .trend_config import TrendConfig
from .seeder import find_initial_trend
from .state_machine import SessionState, TrendStateMachine, segment_series
from .pipeline import segment_prices, segment_ratios
