"""
Segment Scatter Plot

Draws each trend segment as a vertical column of points, one per grid
step between its start and end price, at x = segment position (1-based).
Colours alternate blue/red so consecutive segments stay distinguishable.
"""

import logging
import math
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
from matplotlib.figure import Figure

from ..trend_analysis.types import TrendSegment

logger = logging.getLogger(__name__)

EVEN_COLOR = (0.0, 0.0, 1.0)
ODD_COLOR = (1.0, 0.0, 0.0)
AXIS_PADDING = 3.0


def segment_columns(segments: Sequence[TrendSegment]) -> Tuple[List[np.ndarray], List[np.ndarray]]:
    """
    Convert segments to per-segment point columns.

    An open segment has no end price and is drawn as its start point only.

    Returns:
        (x_data, y_data): parallel lists of arrays, one pair per segment.
    """
    x_data: List[np.ndarray] = []
    y_data: List[np.ndarray] = []

    for position, segment in enumerate(segments, start=1):
        end_price = segment.end_price if segment.end_price is not None else segment.start_price
        low = int(min(segment.start_price, end_price))
        high = int(max(segment.start_price, end_price))
        y_values = np.arange(low, high + 1, dtype=np.float64)
        x_data.append(np.full(y_values.shape, float(position)))
        y_data.append(y_values)

    return x_data, y_data


def compute_bounds(
    x_data: Sequence[np.ndarray],
    y_data: Sequence[np.ndarray],
) -> Optional[Tuple[float, float, float, float]]:
    """
    Axis bounds (x_min, x_max, y_min, y_max) padded by AXIS_PADDING.

    Returns:
        None if there is nothing to draw.
    """
    if not x_data or not any(len(y) for y in y_data):
        return None

    max_x = max(float(x.max()) for x in x_data if len(x)) + AXIS_PADDING
    min_y = min(float(y.min()) for y in y_data if len(y)) - AXIS_PADDING
    max_y = max(float(y.max()) for y in y_data if len(y)) + AXIS_PADDING

    if not all(math.isfinite(v) for v in (max_x, min_y, max_y)):
        return None
    return 0.0, max_x, min_y, max_y


def render_segments(
    segments: Sequence[TrendSegment],
    title: str = "Trend Segments",
    figsize: Tuple[float, float] = (8, 6),
) -> Figure:
    """
    Build the scatter figure for a segment sequence.

    Raises:
        ValueError: If there are no segments to draw.
    """
    x_data, y_data = segment_columns(segments)
    bounds = compute_bounds(x_data, y_data)
    if bounds is None:
        raise ValueError("Invalid data: no segments to draw")
    x_min, x_max, y_min, y_max = bounds

    fig = Figure(figsize=figsize)
    ax = fig.add_subplot(1, 1, 1)
    ax.set_title(title)
    ax.set_xlim(x_min, x_max)
    ax.set_ylim(y_min, y_max)
    ax.set_xlabel("Segment")
    ax.set_ylabel("Grid index")

    for i, (xs, ys) in enumerate(zip(x_data, y_data)):
        color = EVEN_COLOR if i % 2 == 0 else ODD_COLOR
        ax.scatter(xs, ys, s=25, color=color)

    return fig


def save_segment_plot(segments: Sequence[TrendSegment], path: Path, title: str = "Trend Segments") -> Path:
    """Render segments and save the figure as an image."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_segments(segments, title=title)
    fig.savefig(path)
    logger.info(f"Saved segment plot with {len(segments)} segments to {path}")
    return path
