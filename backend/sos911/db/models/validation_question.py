"""Module: validation_question."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sos911.db.base import Base, TimestampMixin, new_id


# Identity check used by the voice agent; only a salted hash of the answer is kept.
class ValidationQuestion(TimestampMixin, Base):
    __tablename__ = "validation_questions"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    question: Mapped[str] = mapped_column(String, nullable=False)
    answer_hash: Mapped[str] = mapped_column(String, nullable=False)

    user = relationship("User", back_populates="validation_questions")
