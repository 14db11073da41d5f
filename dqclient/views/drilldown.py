from __future__ import annotations
from typing import Dict, List, Optional, Sequence

from ..core.types import ColumnDetail, ColumnProfile, ColumnRow
from .transform import numeric_summary, outlier_preview, top_values


class ColumnDrilldown:
    """At most one expanded column over a report's column profiles.

    Details are built only for a column that gets expanded, and kept so that
    collapsing and re-expanding the same column does not recompute them.
    """

    def __init__(self, profiles: Sequence[ColumnProfile]) -> None:
        self._profiles = list(profiles)
        self._by_name: Dict[str, ColumnProfile] = {p.name: p for p in self._profiles}
        self._expanded: Optional[str] = None
        self._details: Dict[str, ColumnDetail] = {}

    @property
    def expanded(self) -> Optional[str]:
        return self._expanded

    def is_expanded(self, name: str) -> bool:
        return self._expanded == name

    def toggle(self, name: str) -> Optional[str]:
        if name not in self._by_name:
            raise KeyError(name)
        self._expanded = None if self._expanded == name else name
        return self._expanded

    def collapse(self) -> None:
        self._expanded = None

    def detail(self) -> Optional[ColumnDetail]:
        if self._expanded is None:
            return None
        cached = self._details.get(self._expanded)
        if cached is None:
            cached = self._build_detail(self._by_name[self._expanded])
            self._details[self._expanded] = cached
        return cached

    def rows(self) -> List[ColumnRow]:
        return [
            ColumnRow(
                name=p.name,
                data_type=p.data_type,
                null_percentage=p.null_percentage,
                unique_count=p.unique_count,
                issue_count=p.issue_count,
                has_pii=bool(p.has_pii),
                expanded=p.name == self._expanded,
            )
            for p in self._profiles
        ]

    @staticmethod
    def _build_detail(profile: ColumnProfile) -> ColumnDetail:
        return ColumnDetail(
            name=profile.name,
            data_type=profile.data_type,
            numeric=numeric_summary(profile),
            top_values=top_values(profile),
            outliers=outlier_preview(profile),
            pii_types=list(profile.pii_types or []) if profile.has_pii else [],
            quality_issues=list(profile.quality_issues or []),
        )


__all__ = ["ColumnDrilldown"]
