from __future__ import annotations

API_PREFIX = "/api/v1/data-quality"
DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_TIMEOUT_SECONDS = 120.0

ENDPOINT_FILE = "/analyze/file"
ENDPOINT_URL = "/analyze/url"
ENDPOINT_INLINE = "/analyze/inline"

ACCEPTED_EXTENSIONS = {
    ".csv": "text/csv",
    ".json": "application/json",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
}

EXPORT_MEDIA_TYPE = "application/json"
EXPORT_FILENAME_TEMPLATE = "data-quality-report-{analysis_id}.json"

_RANKING_LIMIT = 10
_COLUMN_LABEL_WIDTH = 15
_VALUE_LABEL_WIDTH = 20
_LABEL_ELLIPSIS = "..."
_MAX_NUMERIC_COLUMNS = 5
_MAX_DUPLICATE_ROW_PREVIEW = 20
_MAX_OUTLIER_PREVIEW = 5

QUALITY_DIMENSIONS = [
    ("Completeness", "completeness_score"),
    ("Uniqueness", "uniqueness_score"),
    ("Validity", "validity_score"),
    ("Consistency", "consistency_score"),
    ("Accuracy", "accuracy_score"),
    ("Timeliness", "timeliness_score"),
]

# (lower bound, level, tone, headline); first match wins, evaluated top-down.
SCORE_BANDS = [
    (90.0, "EXCELLENT", "green", "Excellent! Your data quality is outstanding."),
    (75.0, "GOOD", "blue", "Good quality with minor improvements needed."),
    (60.0, "FAIR", "yellow", "Fair quality. Several issues should be addressed."),
    (40.0, "POOR", "orange", "Poor quality. Significant improvements required."),
    (float("-inf"), "CRITICAL", "red", "Critical issues detected. Immediate action needed."),
]

# Per-dimension cards use their own, coarser bands.
METRIC_SCORE_BANDS = [
    (85.0, "good"),
    (70.0, "warning"),
    (float("-inf"), "bad"),
]

SEVERITY_TONES = {"HIGH": "high", "MEDIUM": "medium"}
_DEFAULT_SEVERITY_TONE = "info"

FALLBACK_MESSAGES = {
    "file": "Failed to analyze file",
    "url": "Failed to analyze data from URL",
    "inline": "Failed to analyze inline data",
}
