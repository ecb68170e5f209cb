from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Strategy(str, Enum):
    MOBILE = "mobile"
    DESKTOP = "desktop"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Strategy":
        """Only the literal "mobile" selects mobile; anything else is desktop."""
        return cls.MOBILE if value == cls.MOBILE.value else cls.DESKTOP


# ── Upstream payload ───────────────────────────────────────────────
# Lighthouse sends far more fields than we read. extra="allow" keeps them so
# detailed responses can pass categories and audits through unchanged.

class _Upstream(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class AuditRef(_Upstream):
    id: str
    weight: float = 0
    group: Optional[str] = None


class Category(_Upstream):
    id: str = ""
    title: str = ""
    description: str = ""
    score: Optional[float] = None
    audit_refs: list[AuditRef] = Field(default_factory=list, alias="auditRefs")


class AuditDetailItem(_Upstream):
    url: Optional[str] = None
    wasted_bytes: Optional[float] = Field(None, alias="wastedBytes")
    wasted_ms: Optional[float] = Field(None, alias="wastedMs")
    total_bytes: Optional[float] = Field(None, alias="totalBytes")


class AuditDetails(_Upstream):
    items: Optional[list[AuditDetailItem]] = None


class Audit(_Upstream):
    id: str
    title: str = ""
    description: str = ""
    score: Optional[float] = None
    display_value: Optional[str] = Field(None, alias="displayValue")
    details: Optional[AuditDetails] = None


class LighthouseResult(_Upstream):
    categories: dict[str, Category]
    audits: dict[str, Audit] = Field(default_factory=dict)


class PageSpeedPayload(_Upstream):
    lighthouse_result: LighthouseResult = Field(alias="lighthouseResult")
    loading_experience: Optional[dict[str, Any]] = Field(None, alias="loadingExperience")


# ── Our results ────────────────────────────────────────────────────

class ScoreSet(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    performance: int = Field(ge=0, le=100)
    seo: int = Field(ge=0, le=100)
    accessibility: int = Field(ge=0, le=100)
    best_practices: int = Field(ge=0, le=100, alias="bestPractices")

    def as_list(self) -> list[int]:
        return [self.performance, self.seo, self.accessibility, self.best_practices]


class DetailPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    categories: dict[str, Category]
    audits: dict[str, Audit]
    loading_experience: Optional[dict[str, Any]] = Field(None, alias="loadingExperience")

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "categories": {
                key: category.model_dump(by_alias=True, exclude_unset=True)
                for key, category in self.categories.items()
            },
            "audits": {
                key: audit.model_dump(by_alias=True, exclude_unset=True)
                for key, audit in self.audits.items()
            },
        }
        if self.loading_experience is not None:
            body["loadingExperience"] = self.loading_experience
        return body


class ScoreReport(BaseModel):
    url: str
    scores: ScoreSet
    strategy: Strategy
    details: Optional[DetailPayload] = None

    def to_response(self) -> dict[str, Any]:
        """Summary body is {url, scores}; detailed adds strategy and details."""
        body: dict[str, Any] = {
            "url": self.url,
            "scores": self.scores.model_dump(by_alias=True),
        }
        if self.details is not None:
            body["strategy"] = self.strategy.value
            body["details"] = self.details.to_json()
        return body

    def to_cache(self) -> dict[str, Any]:
        body = self.to_response()
        body["strategy"] = self.strategy.value
        return body

    @classmethod
    def from_cache(cls, data: dict[str, Any]) -> "ScoreReport":
        return cls.model_validate(data)


class AuditBuckets(BaseModel):
    opportunities: list[Audit] = Field(default_factory=list)
    diagnostics: list[Audit] = Field(default_factory=list)
    passed: list[Audit] = Field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            bucket: [audit.model_dump(by_alias=True, exclude_unset=True) for audit in audits]
            for bucket, audits in (
                ("opportunities", self.opportunities),
                ("diagnostics", self.diagnostics),
                ("passed", self.passed),
            )
        }


class DualState(str, Enum):
    SUCCEEDED = "succeeded"
    PARTIAL = "partial"
    FAILED = "failed"


class DualStrategyReport(BaseModel):
    """Outcome of checking mobile and desktop together.

    Only SUCCEEDED may be rendered as results; PARTIAL is an error state.
    """

    url: str
    state: DualState
    mobile: Optional[ScoreReport] = None
    desktop: Optional[ScoreReport] = None
    errors: dict[Strategy, str] = Field(default_factory=dict)

    def strategy_states(self) -> dict[str, str]:
        return {
            strategy.value: "failed" if strategy in self.errors else "succeeded"
            for strategy in (Strategy.MOBILE, Strategy.DESKTOP)
        }
