# phishguard/models.py

"""
Result model shared by every scoring strategy.

Python attributes are snake_case; the wire names (what callers and the
automation webhook see) are camelCase.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FRAUD_CUTOFF = 60
SUSPICIOUS_CUTOFF = 20
SNIPPET_LENGTH = 150
ELLIPSIS = "..."


class ThreatLevel(str, Enum):
    SAFE = "SAFE"
    SUSPICIOUS = "SUSPICIOUS"
    FRAUD = "FRAUD"


class IndicatorKind(str, Enum):
    URL = "URL"
    KEYWORD = "KEYWORD"
    BEHAVIOR = "BEHAVIOR"
    FINANCIAL = "FINANCIAL"


class Severity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


def label_for_score(score: int) -> ThreatLevel:
    """Map a 0-100 risk score onto the three threat bands."""
    if score > FRAUD_CUTOFF:
        return ThreatLevel.FRAUD
    if score > SUSPICIOUS_CUTOFF:
        return ThreatLevel.SUSPICIOUS
    return ThreatLevel.SAFE


def clamp_score(score: int) -> int:
    return max(0, min(100, int(score)))


def utc_timestamp() -> str:
    """ISO-8601 UTC instant with millisecond precision, e.g. 2024-03-15T10:30:00.000Z"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class _Frozen(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Indicator(_Frozen):
    kind: IndicatorKind = Field(..., alias="type")
    description: str
    severity: Severity


class GroundingLink(_Frozen):
    title: str
    uri: str


class Assessment(_Frozen):
    """
    Scoring output of one strategy, before it is committed.

    Carries everything except the identity fields (id, input, timestamp),
    which only the orchestrator assigns.
    """

    score: int = Field(..., ge=0, le=100)
    label: ThreatLevel
    explanation: str = Field(..., min_length=1)
    indicators: List[Indicator] = Field(default_factory=list)
    grounding_links: Optional[List[GroundingLink]] = None


class AnalysisResult(_Frozen):
    id: str
    input: str
    score: int = Field(..., ge=0, le=100)
    label: ThreatLevel
    explanation: str = Field(..., min_length=1)
    indicators: List[Indicator] = Field(default_factory=list)
    grounding_links: Optional[List[GroundingLink]] = None
    timestamp: str

    @classmethod
    def commit(cls, text: str, assessment: Assessment) -> "AnalysisResult":
        """Freeze an assessment into a result with a fresh id and completion time."""
        return cls(
            id=str(uuid.uuid4()),
            input=text,
            score=assessment.score,
            label=assessment.label,
            explanation=assessment.explanation,
            indicators=list(assessment.indicators),
            grounding_links=(
                list(assessment.grounding_links)
                if assessment.grounding_links
                else None
            ),
            timestamp=utc_timestamp(),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json", by_alias=True)
        if self.grounding_links is None:
            data.pop("groundingLinks", None)
        return data


class AutomationPayload(_Frozen):
    analysis_id: str
    risk_score: int
    threat_label: ThreatLevel
    input_snippet: str
    explanation: str
    detected_at: str

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AutomationPayload":
        snippet = result.input[:SNIPPET_LENGTH]
        if len(result.input) > SNIPPET_LENGTH:
            snippet += ELLIPSIS
        return cls(
            analysis_id=result.id,
            risk_score=result.score,
            threat_label=result.label,
            input_snippet=snippet,
            explanation=result.explanation,
            detected_at=result.timestamp,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
