"""Chart-ready views derived from an analysis report.

Every function here is pure: it reads the report (or part of it) and returns
fresh view objects, so calling it twice with the same input gives equal
output. Rankings come back as ``Truncated`` so callers can show how many
entries were cut without recomputing anything.
"""
from __future__ import annotations
from collections import Counter
from typing import Any, Iterable, List, Optional, Sequence, Tuple, TypeVar

from ..core.constants import (
    QUALITY_DIMENSIONS,
    _COLUMN_LABEL_WIDTH,
    _MAX_DUPLICATE_ROW_PREVIEW,
    _MAX_NUMERIC_COLUMNS,
    _MAX_OUTLIER_PREVIEW,
    _RANKING_LIMIT,
    _VALUE_LABEL_WIDTH,
)
from ..core.types import (
    AnalysisReport,
    ChartPoint,
    ColumnProfile,
    Dimension,
    DuplicateAnalysis,
    NumericSummary,
    QualityMetrics,
    Truncated,
    TypeCount,
)
from ..core.utils import _truncate_label

T = TypeVar("T")


def _head(items: Sequence[T], limit: int) -> List[T]:
    return list(items)[:max(limit, 0)]


def _point(key: Any, value: float, width: int) -> ChartPoint:
    return ChartPoint(key=str(key), label=_truncate_label(key, width), value=value)


def _ranked_counts(counts: Iterable[Tuple[str, int]], limit: int, width: int) -> Truncated[ChartPoint]:
    ordered = sorted(counts, key=lambda item: item[1], reverse=True)
    items = [_point(key, count, width) for key, count in _head(ordered, limit)]
    return Truncated(items=items, total=len(ordered))


def quality_dimensions(report: AnalysisReport) -> List[Dimension]:
    metrics = report.quality_metrics
    return [Dimension(label=label, score=getattr(metrics, attr)) for label, attr in QUALITY_DIMENSIONS]


def null_ranking(profiles: Sequence[ColumnProfile], limit: int = _RANKING_LIMIT) -> Truncated[ChartPoint]:
    """Columns with nulls, worst first."""
    with_nulls = [p for p in profiles if p.null_percentage > 0]
    with_nulls.sort(key=lambda p: p.null_percentage, reverse=True)
    items = [_point(p.name, round(p.null_percentage, 2), _COLUMN_LABEL_WIDTH) for p in _head(with_nulls, limit)]
    return Truncated(items=items, total=len(with_nulls))


def type_distribution(profiles: Sequence[ColumnProfile]) -> List[TypeCount]:
    counts = Counter(p.data_type for p in profiles)
    return [TypeCount(type=data_type, count=count) for data_type, count in counts.items()]


def uniqueness_ranking(profiles: Sequence[ColumnProfile], limit: int = _RANKING_LIMIT) -> Truncated[ChartPoint]:
    # Original column order, not sorted: rendered as a trend line.
    items = [_point(p.name, round(p.unique_percentage, 2), _COLUMN_LABEL_WIDTH) for p in _head(profiles, limit)]
    return Truncated(items=items, total=len(profiles))


def numeric_summary(profile: ColumnProfile) -> Optional[NumericSummary]:
    return profile.numeric


def numeric_columns(profiles: Sequence[ColumnProfile], limit: int = _MAX_NUMERIC_COLUMNS) -> Truncated[Tuple[str, NumericSummary]]:
    numeric = [(p.name, p.numeric) for p in profiles if p.numeric is not None]
    return Truncated(items=_head(numeric, limit), total=len(numeric))


def duplicate_breakdown(analysis: DuplicateAnalysis, limit: int = _RANKING_LIMIT) -> Truncated[ChartPoint]:
    return _ranked_counts(analysis.duplicates_by_column.items(), limit, _COLUMN_LABEL_WIDTH)


def duplicate_share(analysis: DuplicateAnalysis) -> List[Tuple[str, float]]:
    return [
        ("Unique", 100.0 - analysis.duplicate_percentage),
        ("Duplicates", analysis.duplicate_percentage),
    ]


def duplicate_row_preview(analysis: DuplicateAnalysis, limit: int = _MAX_DUPLICATE_ROW_PREVIEW) -> Truncated[int]:
    indices = list(analysis.duplicate_row_indices)
    return Truncated(items=_head(indices, limit), total=len(indices))


def top_values(profile: ColumnProfile, limit: int = _RANKING_LIMIT) -> Optional[Truncated[ChartPoint]]:
    counts = profile.categorical
    if counts is None:
        return None
    return _ranked_counts(counts.items(), limit, _VALUE_LABEL_WIDTH)


def outlier_preview(profile: ColumnProfile, limit: int = _MAX_OUTLIER_PREVIEW) -> Optional[Truncated[Any]]:
    values = profile.outlier_values or []
    if not profile.has_outliers or not values:
        return None
    return Truncated(items=_head(values, limit), total=len(values))


def cell_completeness(metrics: QualityMetrics) -> Optional[List[Tuple[str, int]]]:
    if metrics.total_cells is None:
        return None
    return [
        ("Complete", metrics.total_cells - metrics.null_cells),
        ("Null", metrics.null_cells),
    ]


__all__ = [
    "cell_completeness",
    "duplicate_breakdown",
    "duplicate_row_preview",
    "duplicate_share",
    "null_ranking",
    "numeric_columns",
    "numeric_summary",
    "outlier_preview",
    "quality_dimensions",
    "top_values",
    "type_distribution",
    "uniqueness_ranking",
]
