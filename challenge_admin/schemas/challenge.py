import json
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from challenge_admin.constants import SOURCE_RESTRICTED_FILTERS
from challenge_admin.schemas.validation import ValidationOut


class TierIn(BaseModel):
    tier_code: str = Field(min_length=1, max_length=64)
    display_name: str = ""
    threshold_value: float = Field(allow_inf_nan=False)
    is_prestige: bool = False
    sort_order: int

    class Config:
        extra = "forbid"


class TierOut(BaseModel):
    tier_code: str
    display_name: str
    threshold_value: float
    is_prestige: bool
    sort_order: int

    class Config:
        from_attributes = True


class MetricFilters(BaseModel):
    realm: Optional[str] = None
    min_level: Optional[int] = Field(default=None, ge=0)
    profession: Optional[str] = None
    rarity_min: Optional[int] = Field(default=None, ge=0, le=4)
    event_key: Optional[str] = None
    since: Optional[date] = None
    until: Optional[date] = None

    class Config:
        extra = "forbid"

    @model_validator(mode="after")
    def _check_window(self) -> "MetricFilters":
        if self.since and self.until and self.since > self.until:
            raise ValueError("since must not be after until")
        return self

    def check_source(self, metric_source: str) -> None:
        for key, sources in SOURCE_RESTRICTED_FILTERS.items():
            if getattr(self, key) is not None and metric_source not in sources:
                raise ValueError(f"filter '{key}' is not supported for metric source '{metric_source}'")


class ThresholdTierConfig(BaseModel):
    unit: Optional[str] = None

    class Config:
        extra = "forbid"


class PercentileTargets(BaseModel):
    pct1: float = Field(default=0.40, gt=0, lt=1)
    pct2: float = Field(default=0.70, gt=0, lt=1)
    pct3: float = Field(default=0.90, gt=0, lt=1)
    pct4: float = Field(default=0.97, gt=0, lt=1)

    class Config:
        extra = "forbid"

    @model_validator(mode="after")
    def _check_increasing(self) -> "PercentileTargets":
        if not (self.pct1 < self.pct2 < self.pct3 < self.pct4):
            raise ValueError("percentile targets must be strictly increasing")
        return self


class PercentileTierConfig(BaseModel):
    cohort_key: str = "ALL"
    targets: PercentileTargets = Field(default_factory=PercentileTargets)

    class Config:
        extra = "forbid"


class ChallengeFields(BaseModel):
    """Editable challenge fields. ``code`` and ``state`` are deliberately absent."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[str] = Field(default=None, min_length=1, max_length=64)
    type: Optional[str] = None
    description_short: Optional[str] = Field(default=None, max_length=512)
    description_long: Optional[str] = None
    metric_type: Optional[str] = None
    metric_source: Optional[str] = None
    metric_key: Optional[str] = Field(default=None, max_length=128)
    metric_aggregation: Optional[str] = None
    metric_filters: Optional[dict[str, Any]] = None
    tiering_mode: Optional[str] = None
    tier_config: Optional[dict[str, Any]] = None
    is_cluster_based: Optional[bool] = None
    is_test_only: Optional[bool] = None
    is_visible_fe: Optional[bool] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None
    tiers: Optional[list[TierIn]] = None

    class Config:
        extra = "forbid"


class ChallengeCreateIn(ChallengeFields):
    code: str = Field(min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_\-]+$")
    name: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=64)


class ChallengePatchIn(ChallengeFields):
    pass


class ChallengeUpdateIn(ChallengePatchIn):
    expected_version: int = Field(ge=0)


class ChallengeOut(BaseModel):
    id: int
    code: str
    name: str
    category: str
    type: str
    state: str
    version: int
    description_short: str
    description_long: str
    metric_type: str
    metric_source: str
    metric_key: str
    metric_aggregation: str
    metric_filters: dict[str, Any]
    tiering_mode: str
    tier_config: dict[str, Any]
    is_cluster_based: bool
    is_test_only: bool
    is_visible_fe: bool
    is_active: bool
    sort_order: int
    created_by: str
    updated_by: str
    created_at: datetime
    updated_at: datetime
    tiers: list[TierOut]
    validation: Optional[ValidationOut] = None

    @classmethod
    def from_model(cls, challenge: Any) -> "ChallengeOut":
        return cls(
            id=challenge.id,
            code=challenge.code,
            name=challenge.name,
            category=challenge.category,
            type=challenge.type,
            state=challenge.state,
            version=challenge.version,
            description_short=challenge.description_short,
            description_long=challenge.description_long,
            metric_type=challenge.metric_type,
            metric_source=challenge.metric_source,
            metric_key=challenge.metric_key,
            metric_aggregation=challenge.metric_aggregation,
            metric_filters=json.loads(challenge.metric_filters_json or "{}"),
            tiering_mode=challenge.tiering_mode,
            tier_config=json.loads(challenge.tier_config_json or "{}"),
            is_cluster_based=challenge.is_cluster_based,
            is_test_only=challenge.is_test_only,
            is_visible_fe=challenge.is_visible_fe,
            is_active=challenge.is_active,
            sort_order=challenge.sort_order,
            created_by=challenge.created_by,
            updated_by=challenge.updated_by,
            created_at=challenge.created_at,
            updated_at=challenge.updated_at,
            tiers=[TierOut.model_validate(t) for t in challenge.tiers],
            validation=ValidationOut.from_model(challenge.validation) if challenge.validation else None,
        )


class ChallengeListItemOut(BaseModel):
    id: int
    code: str
    name: str
    category: str
    type: str
    state: str
    version: int
    is_active: bool
    sort_order: int
    updated_at: datetime

    class Config:
        from_attributes = True
