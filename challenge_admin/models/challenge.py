from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from challenge_admin.models.base import Base, utcnow

if TYPE_CHECKING:
    from challenge_admin.models.challenge_tier import ChallengeTier
    from challenge_admin.models.challenge_validation import ChallengeValidation


class Challenge(Base):
    __tablename__ = "challenges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    code: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    category: Mapped[str] = mapped_column(String(64), index=True)
    type: Mapped[str] = mapped_column(String(32), default="tiered")
    description_short: Mapped[str] = mapped_column(String(512), default="")
    description_long: Mapped[str] = mapped_column(Text, default="")

    metric_type: Mapped[str] = mapped_column(String(32), default="integer")
    metric_source: Mapped[str] = mapped_column(String(64), default="")
    metric_key: Mapped[str] = mapped_column(String(128), default="")
    metric_aggregation: Mapped[str] = mapped_column(String(32), default="count")
    metric_filters_json: Mapped[str] = mapped_column(Text, default="{}")

    tiering_mode: Mapped[str] = mapped_column(String(32), default="threshold")
    tier_config_json: Mapped[str] = mapped_column(Text, default="{}")
    is_cluster_based: Mapped[bool] = mapped_column(Boolean, default=False)

    is_test_only: Mapped[bool] = mapped_column(Boolean, default=False)
    is_visible_fe: Mapped[bool] = mapped_column(Boolean, default=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)

    state: Mapped[str] = mapped_column(String(32), default="draft", index=True)
    version: Mapped[int] = mapped_column(Integer, default=0)
    created_by: Mapped[str] = mapped_column(String(128))
    updated_by: Mapped[str] = mapped_column(String(128))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    tiers: Mapped[list["ChallengeTier"]] = relationship(
        back_populates="challenge",
        order_by="ChallengeTier.sort_order",
        cascade="all, delete-orphan",
    )
    validation: Mapped[Optional["ChallengeValidation"]] = relationship(
        back_populates="challenge",
        uselist=False,
        cascade="all, delete-orphan",
    )


Index("ux_challenges_code_lower", func.lower(Challenge.code), unique=True)
