from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple

from ..core.constants import (
    METRIC_SCORE_BANDS,
    SCORE_BANDS,
    SEVERITY_TONES,
    _DEFAULT_SEVERITY_TONE,
)
from ..core.types import AnalysisReport, DuplicateAnalysis, QualityLevel
from .transform import (
    cell_completeness,
    duplicate_breakdown,
    duplicate_row_preview,
    duplicate_share,
    null_ranking,
    numeric_columns,
    quality_dimensions,
    type_distribution,
    uniqueness_ranking,
)


def band_for_score(score: float) -> Tuple[float, str, str, str]:
    """Return the (lower bound, level, tone, headline) band a health score falls in."""
    for band in SCORE_BANDS:
        if score >= band[0]:
            return band
    return SCORE_BANDS[-1]


def level_for_score(score: float) -> QualityLevel:
    return QualityLevel(band_for_score(score)[1])


def score_tone(score: float) -> str:
    return band_for_score(score)[2]


def level_tone(level: QualityLevel | str) -> str:
    value = QualityLevel(level).value
    for _, band_level, tone, _ in SCORE_BANDS:
        if band_level == value:
            return tone
    return SCORE_BANDS[-1][2]


def metric_tone(score: float) -> str:
    for lower, tone in METRIC_SCORE_BANDS:
        if score >= lower:
            return tone
    return METRIC_SCORE_BANDS[-1][1]


def severity_tone(severity: Optional[str]) -> str:
    return SEVERITY_TONES.get((severity or "").upper(), _DEFAULT_SEVERITY_TONE)


def _metric_cards(report: AnalysisReport) -> List[Dict[str, Any]]:
    metrics = report.quality_metrics
    null_pct = metrics.null_percentage
    details = {
        "Completeness": f"{null_pct:.2f}% null cells" if null_pct is not None else f"{metrics.null_cells} null cells",
        "Uniqueness": f"{metrics.duplicate_rows} duplicate rows",
        "Validity": f"{metrics.invalid_values} invalid values",
        "Consistency": f"{metrics.inconsistent_values} inconsistent",
        "Accuracy": f"{metrics.schema_violations} violations",
        "Timeliness": "Temporal data found" if metrics.has_temporal_data else "No temporal data",
    }
    return [
        {
            "title": dimension.label,
            "score": dimension.score,
            "details": details[dimension.label],
            "tone": metric_tone(dimension.score),
        }
        for dimension in quality_dimensions(report)
    ]


def duplicate_section(analysis: DuplicateAnalysis) -> Optional[Dict[str, Any]]:
    """Duplicate charts, or ``None`` when the dataset has no exact duplicates."""
    if not analysis.has_exact_duplicates:
        return None
    return {
        "totalDuplicates": analysis.total_duplicates,
        "duplicatePercentage": analysis.duplicate_percentage,
        "share": duplicate_share(analysis),
        "byColumn": duplicate_breakdown(analysis),
        "rowIndices": duplicate_row_preview(analysis),
    }


def build_dashboard(report: AnalysisReport) -> Dict[str, Any]:
    """Compose every section of the results page from one report."""
    _, _, tone, headline = band_for_score(report.health_score)
    profiles = report.column_profiles
    metrics = report.quality_metrics

    nulls = null_ranking(profiles)
    charts: Dict[str, Any] = {
        "qualityDimensions": quality_dimensions(report),
        "typeDistribution": type_distribution(profiles),
        "cellCompleteness": cell_completeness(metrics),
        "nullRanking": nulls if nulls.items else None,
        "uniquenessRanking": uniqueness_ranking(profiles) if profiles else None,
        "numericColumns": numeric_columns(profiles),
    }

    issues = [
        {
            "issueType": issue.issue_type,
            "severity": issue.severity,
            "tone": severity_tone(issue.severity),
            "columnName": issue.column_name,
            "affectedRows": issue.affected_rows,
            "description": issue.description,
            "recommendation": issue.recommendation,
        }
        for issue in report.issues
    ]

    pii = None
    findings = report.pii_findings
    if findings is not None and findings.pii_detected:
        pii = {
            "totalPIIColumns": findings.total_pii_columns,
            "byColumn": {column: list(types) for column, types in findings.pii_by_column.items()},
        }

    return {
        "header": {
            "analysisId": report.analysis_id,
            "processingTimeMs": report.processing_time_ms,
            "timestamp": report.timestamp,
        },
        "health": {
            "score": report.health_score,
            "level": report.quality_level.value,
            "levelTone": level_tone(report.quality_level),
            "tone": tone,
            "headline": headline,
            "gaugeFill": report.health_score / 100.0,
        },
        "summary": {
            "fileFormat": report.summary.file_format,
            "rowCount": report.summary.row_count,
            "columnCount": report.summary.column_count,
            "totalCells": report.summary.total_cells,
        },
        "metrics": _metric_cards(report),
        "charts": charts,
        "issues": issues or None,
        "pii": pii,
        "duplicates": duplicate_section(report.duplicate_analysis),
        "recommendations": [
            {"index": index, "text": text} for index, text in enumerate(report.recommendations, start=1)
        ],
    }


__all__ = [
    "band_for_score",
    "build_dashboard",
    "duplicate_section",
    "level_for_score",
    "level_tone",
    "metric_tone",
    "score_tone",
    "severity_tone",
]
