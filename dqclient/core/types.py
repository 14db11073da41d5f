from __future__ import annotations
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, model_validator
from pydantic.alias_generators import to_camel

Percent = Annotated[float, Field(ge=0, le=100)]
Score = Annotated[float, Field(ge=0, le=100)]

T = TypeVar("T")


class QualityLevel(str, Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"
    CRITICAL = "CRITICAL"


class ReportModel(BaseModel):
    """Base for every entity of the analysis report.

    Wire names are camelCase, Python names snake_case. Models are frozen, and
    fields the service adds beyond the ones declared here are kept so an export
    reproduces the received payload.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )


# ---- Numeric summary ----
@dataclass(frozen=True)
class NumericSummary:
    mean: Optional[float] = None
    median: Optional[float] = None
    std_dev: Optional[float] = None
    min: Optional[float] = None
    q1: Optional[float] = None
    q3: Optional[float] = None
    max: Optional[float] = None

    def box_plot(self) -> List[Tuple[str, float]]:
        """Five-number summary as (metric, value) pairs, skipping missing values."""
        points = [
            ("Min", self.min),
            ("Q1", self.q1),
            ("Median", self.median),
            ("Q3", self.q3),
            ("Max", self.max),
        ]
        return [(metric, value) for metric, value in points if value is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min": self.min,
            "q1": self.q1,
            "median": self.median,
            "q3": self.q3,
            "max": self.max,
            "mean": self.mean,
            "stdDev": self.std_dev,
        }


# ---- Report entities ----
class DatasetSummary(ReportModel):
    file_format: str
    row_count: NonNegativeInt
    column_count: NonNegativeInt
    total_cells: NonNegativeInt
    column_names: List[str] = Field(default_factory=list)


class QualityMetrics(ReportModel):
    completeness_score: Score
    uniqueness_score: Score
    validity_score: Score
    consistency_score: Score
    accuracy_score: Score
    timeliness_score: Score

    null_cells: NonNegativeInt = 0
    duplicate_rows: NonNegativeInt = 0
    invalid_values: NonNegativeInt = 0
    inconsistent_values: NonNegativeInt = 0
    schema_violations: NonNegativeInt = 0

    total_cells: Optional[NonNegativeInt] = None
    total_rows: Optional[NonNegativeInt] = None
    null_percentage: Optional[Percent] = None
    duplicate_percentage: Optional[Percent] = None
    invalid_percentage: Optional[Percent] = None
    inconsistent_percentage: Optional[Percent] = None
    has_temporal_data: Optional[bool] = None

    @model_validator(mode="after")
    def _counters_within_totals(self) -> "QualityMetrics":
        if self.total_cells is not None and self.null_cells > self.total_cells:
            raise ValueError("nullCells exceeds totalCells")
        if self.total_rows is not None and self.duplicate_rows > self.total_rows:
            raise ValueError("duplicateRows exceeds totalRows")
        return self


class ColumnProfile(ReportModel):
    name: str = Field(alias="columnName")
    data_type: str = "UNKNOWN"
    total_count: NonNegativeInt
    null_count: NonNegativeInt
    unique_count: NonNegativeInt
    null_percentage: Percent
    unique_percentage: Percent

    mean: Optional[float] = None
    median: Optional[float] = None
    std_dev: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    q1: Optional[float] = None
    q3: Optional[float] = None

    value_counts: Optional[Dict[str, int]] = None

    has_pii: Optional[bool] = Field(default=None, alias="hasPII")
    pii_types: Optional[List[str]] = None
    has_outliers: Optional[bool] = None
    outlier_values: Optional[List[Any]] = None
    quality_issues: Optional[List[str]] = None

    @model_validator(mode="after")
    def _check_consistency(self) -> "ColumnProfile":
        if self.null_count > self.total_count:
            raise ValueError(f"column {self.name!r}: nullCount exceeds totalCount")
        if self.unique_count > self.total_count:
            raise ValueError(f"column {self.name!r}: uniqueCount exceeds totalCount")
        if bool(self.has_pii) != bool(self.pii_types):
            raise ValueError(f"column {self.name!r}: hasPII and piiTypes disagree")
        ordered = [v for v in (self.min, self.q1, self.median, self.q3, self.max) if v is not None]
        if any(a > b for a, b in zip(ordered, ordered[1:])):
            raise ValueError(f"column {self.name!r}: min <= q1 <= median <= q3 <= max violated")
        return self

    @property
    def numeric(self) -> Optional[NumericSummary]:
        if self.mean is None:
            return None
        return NumericSummary(
            mean=self.mean,
            median=self.median,
            std_dev=self.std_dev,
            min=self.min,
            q1=self.q1,
            q3=self.q3,
            max=self.max,
        )

    @property
    def categorical(self) -> Optional[Dict[str, int]]:
        return dict(self.value_counts) if self.value_counts else None

    @property
    def issue_count(self) -> int:
        return len(self.quality_issues or [])


class Issue(ReportModel):
    issue_type: str
    severity: str
    column_name: Optional[str] = None
    description: str = ""
    affected_rows: Optional[NonNegativeInt] = None
    recommendation: str = ""


class PIIFindings(ReportModel):
    pii_detected: bool
    total_pii_columns: NonNegativeInt = Field(default=0, alias="totalPIIColumns")
    pii_by_column: Dict[str, List[str]] = Field(default_factory=dict)


class DuplicateAnalysis(ReportModel):
    total_duplicates: NonNegativeInt
    duplicate_percentage: Percent
    duplicate_row_indices: List[NonNegativeInt] = Field(default_factory=list)
    duplicates_by_column: Dict[str, NonNegativeInt] = Field(default_factory=dict)
    has_exact_duplicates: bool
    has_fuzzy_duplicates: bool = False

    @model_validator(mode="after")
    def _exact_flag_matches_count(self) -> "DuplicateAnalysis":
        if self.has_exact_duplicates != (self.total_duplicates > 0):
            raise ValueError("hasExactDuplicates must be true exactly when totalDuplicates > 0")
        return self


class AnalysisReport(ReportModel):
    analysis_id: str
    timestamp: str
    processing_time_ms: float = Field(ge=0)
    health_score: Score
    quality_level: QualityLevel
    summary: DatasetSummary
    quality_metrics: QualityMetrics
    column_profiles: List[ColumnProfile] = Field(default_factory=list)
    issues: List[Issue] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    pii_findings: Optional[PIIFindings] = None
    duplicate_analysis: DuplicateAnalysis

    @model_validator(mode="after")
    def _unique_column_names(self) -> "AnalysisReport":
        seen = set()
        for profile in self.column_profiles:
            if profile.name in seen:
                raise ValueError(f"duplicate column profile {profile.name!r}")
            seen.add(profile.name)
        return self

    def column(self, name: str) -> ColumnProfile:
        for profile in self.column_profiles:
            if profile.name == name:
                return profile
        raise KeyError(name)

    @property
    def column_names(self) -> List[str]:
        return [profile.name for profile in self.column_profiles]


# ---- View models ----
@dataclass(frozen=True)
class ChartPoint:
    """One bar/slice. ``key`` is the untruncated name, ``label`` is for display."""

    key: str
    label: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Truncated(Generic[T]):
    items: List[T]
    total: int

    @property
    def remaining(self) -> int:
        return max(0, self.total - len(self.items))

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        items = [item.to_dict() if hasattr(item, "to_dict") else item for item in self.items]
        return {"items": items, "total": self.total, "remaining": self.remaining}


@dataclass(frozen=True)
class Dimension:
    label: str
    score: float


@dataclass(frozen=True)
class TypeCount:
    type: str
    count: int


@dataclass(frozen=True)
class ColumnDetail:
    name: str
    data_type: str
    numeric: Optional[NumericSummary]
    top_values: Optional[Truncated[ChartPoint]]
    outliers: Optional[Truncated[Any]]
    pii_types: List[str] = field(default_factory=list)
    quality_issues: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ColumnRow:
    name: str
    data_type: str
    null_percentage: float
    unique_count: int
    issue_count: int
    has_pii: bool
    expanded: bool


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content: bytes
    media_type: str


# ---- Inputs ----
@dataclass(frozen=True)
class FileInput:
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: str | Path) -> "FileInput":
        source = Path(path)
        return cls(filename=source.name, content=source.read_bytes())
