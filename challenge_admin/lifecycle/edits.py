"""Turn create/update payloads into column values, enforcing tier and blob invariants."""

import json
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from challenge_admin.errors import ValidationFailed
from challenge_admin.models import Challenge
from challenge_admin.schemas import MetricFilters, PercentileTierConfig, ThresholdTierConfig, TierIn

ModelT = TypeVar("ModelT", bound=BaseModel)

TIER_CONFIG_SCHEMAS: dict[str, Type[BaseModel]] = {
    "threshold": ThresholdTierConfig,
    "percentile": PercentileTierConfig,
}


def _first_error(exc: ValidationError, prefix: str = "") -> ValidationFailed:
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    field = ".".join(part for part in (prefix, loc) if part) or prefix or "payload"
    return ValidationFailed(field, err.get("msg", "invalid value"))


def parse_payload(model: Type[ModelT], payload: Any) -> ModelT:
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise _first_error(exc) from exc


def validate_tiers(tiers: list[TierIn]) -> list[TierIn]:
    seen_codes: set[str] = set()
    seen_orders: set[int] = set()
    for tier in tiers:
        if tier.tier_code in seen_codes:
            raise ValidationFailed("tiers", f"duplicate tier_code '{tier.tier_code}'")
        if tier.sort_order in seen_orders:
            raise ValidationFailed("tiers", f"duplicate sort_order {tier.sort_order}")
        seen_codes.add(tier.tier_code)
        seen_orders.add(tier.sort_order)
    return sorted(tiers, key=lambda t: t.sort_order)


def normalize_metric_filters(metric_source: str, raw: dict[str, Any]) -> dict[str, Any]:
    try:
        filters = MetricFilters.model_validate(raw)
    except ValidationError as exc:
        raise _first_error(exc, "metric_filters") from exc
    try:
        filters.check_source(metric_source)
    except ValueError as exc:
        raise ValidationFailed("metric_filters", str(exc)) from exc
    return filters.model_dump(mode="json", exclude_none=True)


def normalize_tier_config(tiering_mode: str, raw: dict[str, Any]) -> dict[str, Any]:
    schema = TIER_CONFIG_SCHEMAS.get(tiering_mode)
    if schema is None:
        # "none" and unrecognized modes carry no configuration.
        if raw:
            raise ValidationFailed("tier_config", f"tiering mode '{tiering_mode}' takes no configuration")
        return {}
    try:
        return schema.model_validate(raw).model_dump(mode="json", exclude_none=True)
    except ValidationError as exc:
        raise _first_error(exc, "tier_config") from exc


def build_column_values(
    payload: BaseModel,
    current: Optional[Challenge] = None,
) -> tuple[dict[str, Any], Optional[list[TierIn]]]:
    """Validate the explicitly-set fields of ``payload`` against ``current``.

    Returns the column values to write and, when the payload replaces the
    tier list, the validated tiers. Nothing is written.
    """
    data = payload.model_dump(exclude_unset=True)
    data.pop("code", None)
    data.pop("expected_version", None)
    for field, value in data.items():
        if value is None:
            raise ValidationFailed(field, "may not be null")

    tiers_set = "tiers" in data
    data.pop("tiers", None)

    values: dict[str, Any] = {}
    for field, value in data.items():
        if field not in ("metric_filters", "tier_config"):
            values[field] = value

    metric_source = data.get("metric_source", current.metric_source if current else "")
    if "metric_filters" in data or "metric_source" in data:
        if "metric_filters" in data:
            raw_filters = data["metric_filters"]
        else:
            raw_filters = json.loads(current.metric_filters_json or "{}") if current else {}
        values["metric_filters_json"] = json.dumps(normalize_metric_filters(metric_source or "", raw_filters))

    tiering_mode = data.get("tiering_mode", current.tiering_mode if current else "threshold")
    if "tier_config" in data or "tiering_mode" in data:
        if "tier_config" in data:
            raw_config = data["tier_config"]
        else:
            raw_config = json.loads(current.tier_config_json or "{}") if current else {}
        values["tier_config_json"] = json.dumps(normalize_tier_config(tiering_mode, raw_config))

    tiers = validate_tiers(list(payload.tiers or [])) if tiers_set else None
    return values, tiers
