from challenge_admin.crud.audit import append_audit_entry, has_create_entry, latest_transition, list_audit_entries
from challenge_admin.crud.categories import get_active_categories, seed_categories_if_empty
from challenge_admin.crud.challenges import (
    compare_and_set,
    get_challenge,
    get_challenge_by_code,
    get_validation,
    list_challenge_codes,
    list_challenge_ids,
    list_challenges,
    replace_tiers,
    upsert_validation,
)

__all__ = [
    "append_audit_entry",
    "list_audit_entries",
    "latest_transition",
    "has_create_entry",
    "seed_categories_if_empty",
    "get_active_categories",
    "get_challenge",
    "get_challenge_by_code",
    "get_validation",
    "list_challenges",
    "list_challenge_codes",
    "list_challenge_ids",
    "compare_and_set",
    "replace_tiers",
    "upsert_validation",
]
