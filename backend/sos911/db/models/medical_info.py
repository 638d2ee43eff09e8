"""Module: medical_info."""

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sos911.db.base import Base, TimestampMixin, new_id


# Singleton per user (unique user_id); list columns hold free-text entries.
class MedicalInfo(TimestampMixin, Base):
    __tablename__ = "medical_info"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    medical_conditions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    allergies: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    medications: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    blood_type: Mapped[str | None] = mapped_column(String, nullable=True)
    emergency_notes: Mapped[str | None] = mapped_column(String, nullable=True)
    voice_password_hash: Mapped[str | None] = mapped_column(String, nullable=True)

    user = relationship("User", back_populates="medical_info")
