import pytest

from conftest import column_profile, report_payload
from dqclient.core.types import AnalysisReport, QualityLevel
from dqclient.views.dashboard import (
    band_for_score,
    build_dashboard,
    duplicate_section,
    level_for_score,
    level_tone,
    metric_tone,
    score_tone,
    severity_tone,
)

NO_DUPLICATES = {
    "totalDuplicates": 0,
    "duplicatePercentage": 0.0,
    "duplicateRowIndices": [],
    "duplicatesByColumn": {},
    "hasExactDuplicates": False,
    "hasFuzzyDuplicates": False,
}


@pytest.mark.parametrize(
    "score, level, tone",
    [
        (100.0, QualityLevel.EXCELLENT, "green"),
        (90.0, QualityLevel.EXCELLENT, "green"),
        (89.9, QualityLevel.GOOD, "blue"),
        (75.0, QualityLevel.GOOD, "blue"),
        (73.4, QualityLevel.FAIR, "yellow"),
        (60.0, QualityLevel.FAIR, "yellow"),
        (40.0, QualityLevel.POOR, "orange"),
        (39.99, QualityLevel.CRITICAL, "red"),
        (0.0, QualityLevel.CRITICAL, "red"),
    ],
)
def test_score_bands_share_level_and_tone(score, level, tone):
    assert level_for_score(score) is level
    assert score_tone(score) == tone
    assert level_tone(level) == tone


def test_band_headlines():
    assert band_for_score(95)[3] == "Excellent! Your data quality is outstanding."
    assert band_for_score(12)[3] == "Critical issues detected. Immediate action needed."


def test_metric_and_severity_tones():
    assert [metric_tone(s) for s in (85, 84.9, 70, 69.9)] == ["good", "warning", "warning", "bad"]
    assert severity_tone("HIGH") == "high"
    assert severity_tone("medium") == "medium"
    assert severity_tone("LOW") == "info"
    assert severity_tone(None) == "info"


def test_dashboard_sections():
    report = AnalysisReport.model_validate(report_payload())
    view = build_dashboard(report)

    assert view["header"]["analysisId"] == "a1b2c3d4"
    # level comes from the report, tone of the headline from the score
    assert view["health"]["level"] == "GOOD"
    assert view["health"]["levelTone"] == "blue"
    assert view["health"]["tone"] == "yellow"
    assert view["health"]["gaugeFill"] == pytest.approx(0.734)

    cards = {card["title"]: card for card in view["metrics"]}
    assert cards["Completeness"]["details"] == "3.33% null cells"
    assert cards["Completeness"]["tone"] == "good"
    assert cards["Consistency"]["tone"] == "warning"
    assert cards["Accuracy"]["details"] == "1 violations"
    assert cards["Accuracy"]["tone"] == "bad"
    assert cards["Timeliness"]["details"] == "No temporal data"

    assert [p.key for p in view["charts"]["nullRanking"]] == ["email"]
    assert view["charts"]["cellCompleteness"] == [("Complete", 290), ("Null", 10)]
    assert view["issues"][0]["tone"] == "medium"
    assert view["pii"] == {"totalPIIColumns": 1, "byColumn": {"email": ["EMAIL"]}}
    assert view["duplicates"]["rowIndices"].items == [17, 42]
    assert view["recommendations"] == [
        {"index": 1, "text": "Deduplicate rows"},
        {"index": 2, "text": "Validate email addresses"},
    ]


def test_dashboard_omits_empty_sections():
    payload = report_payload(
        columnProfiles=[column_profile("id", "INTEGER")],
        issues=[],
        recommendations=[],
        piiFindings={"piiDetected": False, "totalPIIColumns": 0, "piiByColumn": {}},
        duplicateAnalysis=NO_DUPLICATES,
    )
    view = build_dashboard(AnalysisReport.model_validate(payload))

    assert view["charts"]["nullRanking"] is None
    assert view["issues"] is None
    assert view["pii"] is None
    assert view["duplicates"] is None
    assert view["recommendations"] == []


def test_no_duplicates_means_no_duplicate_section():
    report = AnalysisReport.model_validate(report_payload(duplicateAnalysis=NO_DUPLICATES))

    assert report.duplicate_analysis.has_exact_duplicates is False
    assert duplicate_section(report.duplicate_analysis) is None
