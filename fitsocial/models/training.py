"""
Training request model - an athlete asking an individual to train them.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Index, Text, UniqueConstraint
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fitsocial.database import Base

if TYPE_CHECKING:
    from fitsocial.models.user import User


class TrainingRequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class TrainingRequest(Base):
    """
    Training request between a requester and a trainer.

    Design decisions:
    - At most one request per ordered (requester, trainer) pair
    - pending -> accepted | rejected, terminal afterwards
    """

    __tablename__ = "training_requests"

    requester_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    trainer_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    status: Mapped[TrainingRequestStatus] = mapped_column(
        SQLEnum(TrainingRequestStatus, name="training_request_status"),
        default=TrainingRequestStatus.PENDING,
    )
    message: Mapped[Optional[str]] = mapped_column(Text)

    requester: Mapped["User"] = relationship("User", foreign_keys=[requester_id])
    trainer: Mapped["User"] = relationship("User", foreign_keys=[trainer_id])

    __table_args__ = (
        UniqueConstraint("requester_id", "trainer_id", name="uq_training_request_pair"),
        Index("idx_training_trainer_status", "trainer_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<TrainingRequest(id={self.id}, requester_id={self.requester_id}, trainer_id={self.trainer_id}, status='{self.status}')>"
