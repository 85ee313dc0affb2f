from sqlalchemy import select
from sqlalchemy.orm import Session

from challenge_admin.models import ChallengeCategory

DEFAULT_CATEGORIES = [
    {
        "key": "hero_progression",
        "name": "Hero Progression",
        "description": "Level up, quest, hunt, and grow your roster.",
        "tier_system": "RARITY",
        "sort_order": 1,
    },
    {
        "key": "economy_strategy",
        "name": "Economy & Strategy",
        "description": "Optimize gold, DeFi yields, and reinvestment behavior.",
        "tier_system": "GENE",
        "sort_order": 2,
    },
    {
        "key": "profession_specialization",
        "name": "Profession Specialization",
        "description": "Master mining, gardening, fishing, and foraging.",
        "tier_system": "MIXED",
        "sort_order": 3,
    },
    {
        "key": "ownership_collection",
        "name": "Ownership & Collection",
        "description": "Grow your army of heroes, pets, gear, and Gen0s.",
        "tier_system": "RARITY",
        "sort_order": 4,
    },
    {
        "key": "behavior_engagement",
        "name": "Behavior & Engagement",
        "description": "Show your commitment to the Kingdom and to Hedge.",
        "tier_system": "GENE",
        "sort_order": 5,
    },
    {
        "key": "seasonal_events",
        "name": "Seasonal & Events",
        "description": "Limited-time challenges that rotate with the seasons.",
        "tier_system": "MIXED",
        "sort_order": 6,
    },
    {
        "key": "prestige_overall",
        "name": "Prestige",
        "description": "Ultra-rare account-wide achievements.",
        "tier_system": "PRESTIGE",
        "sort_order": 7,
    },
]


def seed_categories_if_empty(db: Session) -> int:
    existing = db.scalar(select(ChallengeCategory.id).limit(1))
    if existing:
        return 0

    for item in DEFAULT_CATEGORIES:
        db.add(ChallengeCategory(**item))
    db.commit()
    return len(DEFAULT_CATEGORIES)


def get_active_categories(db: Session) -> list[ChallengeCategory]:
    return list(
        db.scalars(
            select(ChallengeCategory)
            .where(ChallengeCategory.is_active.is_(True))
            .order_by(ChallengeCategory.sort_order)
        )
    )
