"""
Series preprocessing: sort, align, back-link and number observations.

The same routine serves absolute prices (high/low/close each aligned
independently) and relative-strength ratios (one scalar mapped onto all
three observation fields).
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional

from .aligner import align_value
from .errors import EmptyInputError
from .grid import QuantizationGrid
from .types import AlignedField, Observation, RatioRecord

logger = logging.getLogger(__name__)

# Observation field -> attribute read from the raw record
PRICE_FIELDS: Dict[str, str] = {"high": "high", "low": "low", "close": "close"}
RATIO_FIELDS: Dict[str, str] = {"high": "ratio", "low": "ratio", "close": "ratio"}


def preprocess_series(
    records: Iterable,
    grid: QuantizationGrid,
    field_map: Optional[Dict[str, str]] = None,
) -> List[Observation]:
    """
    Convert raw records into aligned, back-linked observations.

    Records are sorted by date ascending. Each mapped field is aligned
    independently; a record with any field below the grid minimum is
    excluded. Back-links and sequence numbers are assigned over the
    retained records.

    Args:
        records: Objects with a ``date`` attribute and the attributes
            named in field_map.
        grid: Grid to align against.
        field_map: Observation field ("high", "low", "close") -> record
            attribute. Defaults to PRICE_FIELDS.

    Returns:
        Observations in chronological order.

    Raises:
        EmptyInputError: If there are no records, or none survive alignment.
        NonFiniteValueError: If any mapped value is NaN or infinite.
    """
    field_map = field_map or PRICE_FIELDS
    ordered = sorted(records, key=lambda r: r.date)
    if not ordered:
        raise EmptyInputError("Cannot preprocess an empty series")

    aligned_rows = []
    excluded: Counter = Counter()
    for record in ordered:
        fields = {}
        for target, source in field_map.items():
            raw = float(getattr(record, source))
            level = align_value(grid, raw)
            if level is None:
                excluded[source] += 1
                break
            fields[target] = AlignedField(raw=raw, value=level.value, index=level.index)
        else:
            aligned_rows.append((record.date, fields))

    for source, count in excluded.items():
        logger.warning(
            f"Excluded {count} record(s) with {source} below grid minimum "
            f"{grid.min_value} ({grid.kind} grid)"
        )

    if not aligned_rows:
        raise EmptyInputError(
            f"No records could be aligned to the {grid.kind} grid "
            f"({len(ordered)} record(s) below minimum {grid.min_value})"
        )

    observations = []
    previous_date = None
    for sequence_number, (date, fields) in enumerate(aligned_rows):
        observations.append(Observation(
            date=date,
            high=fields["high"],
            low=fields["low"],
            close=fields["close"],
            previous_date=previous_date,
            sequence_number=sequence_number,
        ))
        previous_date = date

    return observations


def preprocess_ratios(records: Iterable[RatioRecord], grid: QuantizationGrid) -> List[Observation]:
    """Preprocess a relative-strength series against a ratio grid."""
    return preprocess_series(records, grid, RATIO_FIELDS)
