from challenge_admin.schemas.audit import AuditEntryOut
from challenge_admin.schemas.category import CategoryOut
from challenge_admin.schemas.challenge import (
    ChallengeCreateIn,
    ChallengeListItemOut,
    ChallengeOut,
    ChallengePatchIn,
    ChallengeUpdateIn,
    MetricFilters,
    PercentileTierConfig,
    ThresholdTierConfig,
    TierIn,
    TierOut,
)
from challenge_admin.schemas.transition import TransitionIn, TransitionOut
from challenge_admin.schemas.validation import AutoChecks, ManualChecks, ValidationOut, ValidationRunIn, ValidationRunOut

__all__ = [
    "AuditEntryOut",
    "AutoChecks",
    "CategoryOut",
    "ChallengeCreateIn",
    "ChallengeListItemOut",
    "ChallengeOut",
    "ChallengePatchIn",
    "ChallengeUpdateIn",
    "ManualChecks",
    "MetricFilters",
    "PercentileTierConfig",
    "ThresholdTierConfig",
    "TierIn",
    "TierOut",
    "TransitionIn",
    "TransitionOut",
    "ValidationOut",
    "ValidationRunIn",
    "ValidationRunOut",
]
