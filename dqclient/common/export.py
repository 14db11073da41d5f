"""Helpers for writing an analysis report back out as a downloadable artifact."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from ..core.constants import EXPORT_FILENAME_TEMPLATE, EXPORT_MEDIA_TYPE
from ..core.types import AnalysisReport, ExportArtifact
from ..core.utils import _json_bytes, _safe_filename

logger = logging.getLogger(__name__)


def export_filename_for(analysis_id: str) -> str:
    return EXPORT_FILENAME_TEMPLATE.format(analysis_id=analysis_id)


def report_payload(report: AnalysisReport) -> Dict[str, Any]:
    """Wire-format dict of the report.

    Only keys that were present when the report was received are emitted,
    explicit nulls and fields unknown to the model included, so the export
    matches what the service sent.
    """
    return report.model_dump(mode="json", by_alias=True, exclude_unset=True)


def export_report(report: AnalysisReport) -> ExportArtifact:
    return ExportArtifact(
        filename=export_filename_for(report.analysis_id),
        content=_json_bytes(report_payload(report)),
        media_type=EXPORT_MEDIA_TYPE,
    )


def parse_report(content: Union[bytes, str]) -> AnalysisReport:
    if isinstance(content, bytes):
        content = content.decode("utf-8")
    return AnalysisReport.model_validate(json.loads(content))


def write_report(report: AnalysisReport, directory: Union[str, Path]) -> Path:
    """Write the export artifact into ``directory`` and return its path."""
    artifact = export_report(report)
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / _safe_filename(artifact.filename, "data-quality-report.json")
    path.write_bytes(artifact.content)
    logger.info("report exported", extra={"analysis_id": report.analysis_id, "path": str(path)})
    return path


def read_report(path: Union[str, Path]) -> AnalysisReport:
    return parse_report(Path(path).read_bytes())


__all__ = [
    "export_filename_for",
    "export_report",
    "parse_report",
    "read_report",
    "report_payload",
    "write_report",
]
