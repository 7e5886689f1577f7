"""ReviewerAssignment model."""
from datetime import datetime

from sqlalchemy import ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..storage.database import Base, UTCDateTime, utcnow


class ReviewerAssignment(Base):
    """A user currently reviewing a pull request.

    The composite primary key keeps a (pull request, user) pair unique.
    """

    __tablename__ = "pr_reviewers"

    pull_request_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("pull_requests.pull_request_id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.user_id"), primary_key=True, index=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    pull_request: Mapped["PullRequest"] = relationship("PullRequest", back_populates="reviewers")

    def __repr__(self) -> str:
        return f"<ReviewerAssignment(pull_request_id='{self.pull_request_id}', user_id='{self.user_id}')>"
