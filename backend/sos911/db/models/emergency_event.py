"""Module: emergency_event."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sos911.db.base import Base, TimestampMixin, new_id

EVENT_STATUSES = ("active", "resolved", "cancelled")


# Emergency reported by a user or by the voice agent on the user's behalf.
# Status changes are unconstrained.
class EmergencyEvent(TimestampMixin, Base):
    __tablename__ = "emergency_events"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    event_type: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    location: Mapped[str] = mapped_column(String, nullable=False)
    audio_recording_url: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")

    user = relationship("User", back_populates="emergency_events")
