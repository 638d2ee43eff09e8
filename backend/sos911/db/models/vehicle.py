"""Module: vehicle."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sos911.db.base import Base, TimestampMixin, new_id


# Vehicles registered by a user; insurance policies hang off each vehicle.
class Vehicle(TimestampMixin, Base):
    __tablename__ = "vehicles"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    license_plate: Mapped[str] = mapped_column(String, nullable=False)
    brand: Mapped[str] = mapped_column(String, nullable=False)
    model: Mapped[str] = mapped_column(String, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    color: Mapped[str] = mapped_column(String, nullable=False)
    vin: Mapped[str | None] = mapped_column(String, nullable=True)
    vehicle_type: Mapped[str] = mapped_column(String, nullable=False)

    user = relationship("User", back_populates="vehicles")
    vehicle_insurance = relationship(
        "VehicleInsurance",
        back_populates="vehicle",
        cascade="all, delete-orphan",
        order_by="desc(VehicleInsurance.created_at)",
    )


class VehicleInsurance(TimestampMixin, Base):
    __tablename__ = "vehicle_insurance"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    vehicle_id: Mapped[str] = mapped_column(String, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False)

    insurance_company: Mapped[str] = mapped_column(String, nullable=False)
    policy_number: Mapped[str] = mapped_column(String, nullable=False)
    coverage_type: Mapped[str] = mapped_column(String, nullable=False)
    expiration_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    phone_insurance: Mapped[str] = mapped_column(String, nullable=False)
    claim_process_info: Mapped[str | None] = mapped_column(String, nullable=True)

    vehicle = relationship("Vehicle", back_populates="vehicle_insurance")
