import copy

import anyio
import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from dqclient.api.client import AnalysisClient
from dqclient.core.constants import API_PREFIX


def column_profile(name: str, data_type: str = "STRING", total: int = 100, nulls: int = 0, unique: int = 100, **fields):
    profile = {
        "columnName": name,
        "dataType": data_type,
        "totalCount": total,
        "nullCount": nulls,
        "uniqueCount": unique,
        "nullPercentage": round(nulls * 100.0 / total, 2) if total else 0.0,
        "uniquePercentage": round(unique * 100.0 / total, 2) if total else 0.0,
        "hasPII": False,
        "piiTypes": [],
        "hasOutliers": False,
        "outlierValues": [],
        "qualityIssues": [],
    }
    profile.update(fields)
    return profile


def report_payload(**overrides):
    payload = {
        "analysisId": "a1b2c3d4",
        "timestamp": "2024-05-01T12:00:00Z",
        "processingTimeMs": 1523,
        "healthScore": 73.4,
        "qualityLevel": "GOOD",
        "summary": {
            "fileFormat": "CSV",
            "rowCount": 100,
            "columnCount": 3,
            "totalCells": 300,
            "columnNames": ["customer_id", "email", "age"],
        },
        "qualityMetrics": {
            "completenessScore": 96.7,
            "uniquenessScore": 98.0,
            "validityScore": 88.5,
            "consistencyScore": 72.0,
            "accuracyScore": 64.0,
            "timelinessScore": 100.0,
            "nullCells": 10,
            "duplicateRows": 2,
            "invalidValues": 4,
            "inconsistentValues": 6,
            "schemaViolations": 1,
            "totalCells": 300,
            "totalRows": 100,
            "nullPercentage": 3.33,
            "hasTemporalData": False,
        },
        "columnProfiles": [
            column_profile("customer_id", "INTEGER", unique=98, mean=50.5, median=50.0, stdDev=28.9,
                           min=1.0, q1=25.0, q3=75.0, max=100.0),
            column_profile("email", "STRING", nulls=10, unique=88, hasPII=True, piiTypes=["EMAIL"],
                           valueCounts={"a@example.com": 2, "b@example.com": 1},
                           qualityIssues=["10 null values"]),
            column_profile("age", "INTEGER", unique=60, mean=41.2, median=39.0, stdDev=12.4,
                           min=18.0, q1=30.0, q3=52.0, max=240.0,
                           hasOutliers=True, outlierValues=[240]),
        ],
        "issues": [
            {
                "issueType": "MISSING_VALUES",
                "severity": "MEDIUM",
                "columnName": "email",
                "description": "Column has 10% null values",
                "affectedRows": 10,
                "recommendation": "Fill or drop missing emails",
            },
        ],
        "recommendations": ["Deduplicate rows", "Validate email addresses"],
        "piiFindings": {
            "piiDetected": True,
            "totalPIIColumns": 1,
            "piiByColumn": {"email": ["EMAIL"]},
        },
        "duplicateAnalysis": {
            "totalDuplicates": 2,
            "duplicatePercentage": 2.0,
            "duplicateRowIndices": [17, 42],
            "duplicatesByColumn": {"customer_id": 2},
            "hasExactDuplicates": True,
            "hasFuzzyDuplicates": False,
        },
    }
    payload.update(overrides)
    return payload


class FakeAnalysisService:
    """Stand-in for the data-quality service, mounted under the real API prefix."""

    def __init__(self):
        self.calls = []
        self.status_code = 200
        self.payload = report_payload()
        self.raw_body = None
        self.gate = None
        self.app = FastAPI()

        @self.app.post(API_PREFIX + "/analyze/{kind}")
        async def analyze(kind: str, request: Request):
            self.calls.append({
                "kind": kind,
                "content_type": request.headers.get("content-type", ""),
                "body": await request.body(),
            })
            if self.gate is not None:
                await self.gate.wait()
            if self.raw_body is not None:
                return Response(content=self.raw_body, status_code=self.status_code, media_type="application/json")
            return JSONResponse(copy.deepcopy(self.payload), status_code=self.status_code)

    def respond_with(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def respond_raw(self, body: bytes, status_code=200):
        self.raw_body = body
        self.status_code = status_code


@pytest.fixture()
def analysis_service():
    return FakeAnalysisService()


@pytest.fixture()
def analysis_client(analysis_service):
    transport = httpx.ASGITransport(app=analysis_service.app)
    return AnalysisClient("http://testserver", transport=transport)


@pytest.fixture()
def run():
    def _run(func, *args):
        return anyio.run(func, *args)

    return _run
