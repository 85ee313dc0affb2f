from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from challenge_admin.models.base import Base

if TYPE_CHECKING:
    from challenge_admin.models.challenge import Challenge


class ChallengeValidation(Base):
    __tablename__ = "challenge_validations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    challenge_id: Mapped[int] = mapped_column(
        ForeignKey("challenges.id", ondelete="CASCADE"), unique=True, index=True
    )
    auto_checks_json: Mapped[str] = mapped_column(Text, default="{}")
    manual_checks_json: Mapped[str] = mapped_column(Text, default="{}")
    last_run_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    last_run_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    challenge: Mapped["Challenge"] = relationship(back_populates="validation")
