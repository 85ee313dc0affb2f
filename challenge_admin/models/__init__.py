from challenge_admin.models.base import Base
from challenge_admin.models.audit_log import ChallengeAuditLog
from challenge_admin.models.challenge import Challenge
from challenge_admin.models.challenge_category import ChallengeCategory
from challenge_admin.models.challenge_tier import ChallengeTier
from challenge_admin.models.challenge_validation import ChallengeValidation

__all__ = [
    "Base",
    "Challenge",
    "ChallengeAuditLog",
    "ChallengeCategory",
    "ChallengeTier",
    "ChallengeValidation",
]
