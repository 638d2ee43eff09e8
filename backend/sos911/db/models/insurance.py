"""Module: insurance."""

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sos911.db.base import Base, TimestampMixin, new_id


# Health plan memberships (public/private provider, plan and member id).
class HealthInsurance(TimestampMixin, Base):
    __tablename__ = "health_insurance"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    primary_provider: Mapped[bool] = mapped_column(Boolean, nullable=False)
    provider_name: Mapped[str] = mapped_column(String, nullable=False)
    plan_name: Mapped[str | None] = mapped_column(String, nullable=True)
    member_id: Mapped[str] = mapped_column(String, nullable=False)
    coverage_info: Mapped[str | None] = mapped_column(String, nullable=True)

    user = relationship("User", back_populates="health_insurance")


# Extra policies on top of the health plan (life, accident, dental...).
class SupplementaryInsurance(TimestampMixin, Base):
    __tablename__ = "supplementary_insurance"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    insurance_type: Mapped[str] = mapped_column(String, nullable=False)
    insurance_company: Mapped[str] = mapped_column(String, nullable=False)
    policy_number: Mapped[str] = mapped_column(String, nullable=False)
    coverage_info: Mapped[str | None] = mapped_column(String, nullable=True)

    user = relationship("User", back_populates="supplementary_insurance")
