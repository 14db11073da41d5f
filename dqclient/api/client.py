# dqclient/api/client.py
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as SchemaValidationError

from ..core.constants import (
    ACCEPTED_EXTENSIONS,
    API_PREFIX,
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT_SECONDS,
    ENDPOINT_FILE,
    ENDPOINT_INLINE,
    ENDPOINT_URL,
)
from ..core.errors import EmptyResultError, TransportError
from ..core.types import AnalysisReport, FileInput
from ..core.utils import _error_message_from_body, _file_extension

# ---- Env ----
API_URL = os.environ.get("DQ_API_URL")
API_TIMEOUT = float(os.environ.get("DQ_API_TIMEOUT") or DEFAULT_TIMEOUT_SECONDS)

# ---- Logging ----
logger = logging.getLogger("dqclient.api")


def resolve_base_url(api_url: Optional[str] = None) -> str:
    """Return the analysis endpoint root for a service URL (or the configured default)."""
    root = (api_url or API_URL or DEFAULT_API_URL).rstrip("/")
    if root.endswith(API_PREFIX):
        return root
    return f"{root}{API_PREFIX}"


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _failure_message(response: httpx.Response) -> str:
    try:
        body: Any = response.json()
    except ValueError:
        body = response.text
    message = _error_message_from_body(body)
    if message:
        return message
    return f"Request failed with status code {response.status_code}"


def _parse_report(response: httpx.Response) -> AnalysisReport:
    if not response.content or not response.content.strip():
        raise EmptyResultError("The analysis service returned an empty response")
    try:
        payload = response.json()
    except ValueError as exc:
        raise EmptyResultError("The analysis service returned a response that is not JSON") from exc
    if not isinstance(payload, dict) or not payload:
        raise EmptyResultError("The analysis service returned no report")
    try:
        return AnalysisReport.model_validate(payload)
    except SchemaValidationError as exc:
        logger.warning("report failed schema checks", extra={"errors": exc.error_count()})
        raise EmptyResultError("The analysis service returned an unusable report") from exc


class AnalysisClient:
    """Issues analysis requests against the data-quality service.

    Holds only what is needed to build requests; every call opens and closes
    its own HTTP connection pool.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.base_url = resolve_base_url(base_url)
        self.timeout = API_TIMEOUT if timeout is None else timeout
        self._transport = transport
        self._headers = dict(headers or {})

    async def analyze_file(
        self,
        file: FileInput,
        *,
        perform_pii_check: bool = True,
        perform_bias_check: bool = False,
    ) -> AnalysisReport:
        content_type = file.content_type or ACCEPTED_EXTENSIONS.get(
            _file_extension(file.filename), "application/octet-stream"
        )
        return await self._post(
            ENDPOINT_FILE,
            files={"file": (file.filename, file.content, content_type)},
            data={
                "performPIICheck": _flag(perform_pii_check),
                "performBiasCheck": _flag(perform_bias_check),
            },
        )

    async def analyze_url(
        self,
        data_url: str,
        *,
        perform_pii_check: bool = True,
        perform_bias_check: bool = False,
    ) -> AnalysisReport:
        return await self._post(
            ENDPOINT_URL,
            json={
                "dataUrl": data_url,
                "performPIICheck": perform_pii_check,
                "performBiasCheck": perform_bias_check,
            },
        )

    async def analyze_inline(
        self,
        inline_data: str,
        *,
        perform_pii_check: bool = True,
        perform_bias_check: bool = False,
    ) -> AnalysisReport:
        return await self._post(
            ENDPOINT_INLINE,
            json={
                "inlineData": inline_data,
                "performPIICheck": perform_pii_check,
                "performBiasCheck": perform_bias_check,
            },
        )

    async def _post(self, path: str, **kwargs: Any) -> AnalysisReport:
        start = time.time()
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers=self._headers,
            ) as http:
                response = await http.post(path, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("analysis request timed out", extra={"path": path, "timeout": self.timeout})
            raise TransportError("The analysis request timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("analysis request failed", extra={"path": path, "error": str(exc)})
            raise TransportError(str(exc)) from exc

        duration_ms = int((time.time() - start) * 1000)
        logger.info(
            "analysis request completed",
            extra={"path": path, "status_code": response.status_code, "duration_ms": duration_ms},
        )

        if response.status_code >= 400:
            raise TransportError(_failure_message(response), status_code=response.status_code)
        return _parse_report(response)


__all__ = ["API_TIMEOUT", "API_URL", "AnalysisClient", "resolve_base_url"]
