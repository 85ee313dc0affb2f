from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from challenge_admin.models.base import Base

if TYPE_CHECKING:
    from challenge_admin.models.challenge import Challenge


class ChallengeTier(Base):
    __tablename__ = "challenge_tiers"
    __table_args__ = (
        UniqueConstraint("challenge_id", "tier_code", name="uq_challenge_tier_code"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    challenge_id: Mapped[int] = mapped_column(ForeignKey("challenges.id", ondelete="CASCADE"), index=True)
    tier_code: Mapped[str] = mapped_column(String(64))
    display_name: Mapped[str] = mapped_column(String(255), default="")
    threshold_value: Mapped[float] = mapped_column(Float)
    is_prestige: Mapped[bool] = mapped_column(Boolean, default=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)

    challenge: Mapped["Challenge"] = relationship(back_populates="tiers")
