CHALLENGE_STATES = ("draft", "validated", "deployed", "deprecated")
INITIAL_STATE = "draft"
EDITABLE_STATES = frozenset({"draft", "validated"})

CHALLENGE_TYPES = frozenset({"tiered", "binary", "milestone"})
METRIC_TYPES = frozenset({"integer", "decimal", "boolean"})
METRIC_AGGREGATIONS = frozenset({"count", "sum", "max", "min", "avg", "latest"})
BOOLEAN_AGGREGATIONS = frozenset({"latest", "count"})
TIERING_MODES = frozenset({"threshold", "percentile", "none"})
TIER_SYSTEMS = frozenset({"RARITY", "GENE", "MIXED", "PRESTIGE"})

METRIC_SOURCES = frozenset(
    {
        "onchain_heroes",
        "onchain_quests",
        "onchain_summons",
        "onchain_pets",
        "onchain_meditation",
        "onchain_gardens",
        "onchain_portfolio",
        "behavior_model",
        "discord_interactions",
        "payment_events",
        "event_progress",
    }
)

# Filters that only make sense for some metric sources.
SOURCE_RESTRICTED_FILTERS = {
    "event_key": frozenset({"event_progress"}),
    "profession": frozenset({"onchain_heroes", "onchain_quests"}),
}

AUDIT_ACTIONS = ("create", "update", "validate", "transition")
RECONCILE_ACTOR = "system:reconcile"
