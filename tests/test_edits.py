"""Tests for structured metric filters, tier config and tier invariants on create/edit."""

import json

import pytest

from challenge_admin.errors import ValidationFailed
from challenge_admin.lifecycle.edits import normalize_metric_filters, normalize_tier_config, validate_tiers
from challenge_admin.schemas import TierIn

from conftest import challenge_payload


class TestMetricFilters:
    def test_known_keys_are_normalized(self):
        result = normalize_metric_filters("onchain_heroes", {"realm": "crystalvale", "min_level": 5})
        assert result == {"realm": "crystalvale", "min_level": 5}

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationFailed) as excinfo:
            normalize_metric_filters("onchain_heroes", {"wallet": "0xabc"})
        assert excinfo.value.field.startswith("metric_filters")

    def test_event_key_only_for_event_progress(self):
        assert normalize_metric_filters("event_progress", {"event_key": "lunar"}) == {"event_key": "lunar"}
        with pytest.raises(ValidationFailed):
            normalize_metric_filters("onchain_pets", {"event_key": "lunar"})

    def test_profession_only_for_hero_sources(self):
        with pytest.raises(ValidationFailed):
            normalize_metric_filters("payment_events", {"profession": "mining"})

    def test_inverted_window_rejected(self):
        with pytest.raises(ValidationFailed):
            normalize_metric_filters("onchain_quests", {"since": "2026-05-01", "until": "2026-04-01"})

    def test_rarity_bounds(self):
        with pytest.raises(ValidationFailed):
            normalize_metric_filters("onchain_heroes", {"rarity_min": 7})


class TestTierConfig:
    def test_threshold_unit(self):
        assert normalize_tier_config("threshold", {"unit": "levels"}) == {"unit": "levels"}

    def test_percentile_defaults(self):
        config = normalize_tier_config("percentile", {})
        assert config["cohort_key"] == "ALL"
        assert config["targets"] == {"pct1": 0.40, "pct2": 0.70, "pct3": 0.90, "pct4": 0.97}

    def test_percentile_targets_must_increase(self):
        with pytest.raises(ValidationFailed):
            normalize_tier_config("percentile", {"targets": {"pct1": 0.9, "pct2": 0.5, "pct3": 0.95, "pct4": 0.99}})

    def test_none_mode_takes_no_config(self):
        assert normalize_tier_config("none", {}) == {}
        with pytest.raises(ValidationFailed):
            normalize_tier_config("none", {"unit": "levels"})

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationFailed):
            normalize_tier_config("threshold", {"curve": "log"})


class TestTierInvariants:
    def test_sorted_by_sort_order(self):
        tiers = validate_tiers([
            TierIn(tier_code="RARE", threshold_value=50, sort_order=2),
            TierIn(tier_code="COMMON", threshold_value=10, sort_order=1),
        ])
        assert [t.tier_code for t in tiers] == ["COMMON", "RARE"]

    def test_duplicate_sort_order_rejected(self):
        with pytest.raises(ValidationFailed):
            validate_tiers([
                TierIn(tier_code="COMMON", threshold_value=10, sort_order=1),
                TierIn(tier_code="RARE", threshold_value=50, sort_order=1),
            ])


class TestEditsThroughController:
    def test_switching_source_revalidates_stored_filters(self, controller):
        challenge = controller.create_challenge(
            challenge_payload(metric_source="event_progress", metric_filters={"event_key": "lunar"}), "alice"
        )
        with pytest.raises(ValidationFailed):
            controller.update_challenge(challenge.id, {"metric_source": "onchain_pets"}, "bob", expected_version=0)

    def test_switching_to_percentile_fills_defaults(self, controller, draft):
        updated = controller.update_challenge(
            draft.id, {"tiering_mode": "percentile", "tier_config": {"cohort_key": "WHALES"}}, "bob", 0
        )
        stored = json.loads(updated.tier_config_json)
        assert stored["cohort_key"] == "WHALES"
        assert stored["targets"]["pct4"] == 0.97

    def test_null_field_rejected(self, controller, draft):
        with pytest.raises(ValidationFailed) as excinfo:
            controller.update_challenge(draft.id, {"name": None}, "bob", expected_version=0)
        assert excinfo.value.field == "name"

    def test_non_finite_threshold_rejected(self, controller, draft):
        tiers = [{"tier_code": "COMMON", "threshold_value": float("inf"), "sort_order": 1}]
        with pytest.raises(ValidationFailed):
            controller.update_challenge(draft.id, {"tiers": tiers}, "bob", expected_version=0)
