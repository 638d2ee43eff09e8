"""Module: user."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sos911.db.base import Base, TimestampMixin


# Local mirror of an identity-provider account; the id is the provider's uid.
# Every owned resource cascades from here.
class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)

    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String, nullable=True)
    rut: Mapped[str | None] = mapped_column(String, unique=True, nullable=True)
    profile_picture_url: Mapped[str | None] = mapped_column(String, nullable=True)

    medical_info = relationship("MedicalInfo", uselist=False, back_populates="user", cascade="all, delete-orphan")
    emergency_contacts = relationship(
        "EmergencyContact", back_populates="user", cascade="all, delete-orphan", order_by="desc(EmergencyContact.created_at)"
    )
    vehicles = relationship("Vehicle", back_populates="user", cascade="all, delete-orphan", order_by="desc(Vehicle.created_at)")
    addresses = relationship(
        "Address",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="(desc(Address.is_primary), desc(Address.created_at))",
    )
    bank_accounts = relationship(
        "BankAccount", back_populates="user", cascade="all, delete-orphan", order_by="desc(BankAccount.created_at)"
    )
    health_insurance = relationship(
        "HealthInsurance", back_populates="user", cascade="all, delete-orphan", order_by="desc(HealthInsurance.created_at)"
    )
    supplementary_insurance = relationship(
        "SupplementaryInsurance",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="desc(SupplementaryInsurance.created_at)",
    )
    emergency_events = relationship(
        "EmergencyEvent", back_populates="user", cascade="all, delete-orphan", order_by="desc(EmergencyEvent.created_at)"
    )
    validation_questions = relationship("ValidationQuestion", back_populates="user", cascade="all, delete-orphan")
