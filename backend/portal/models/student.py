from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, Enum as SqlEnum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portal.db.base import Base, enum_values


class FeeLevel(str, Enum):
    VILLAGE = "village"
    BLOCK = "block"
    DISTRICT = "district"
    HARYANA = "haryana"


FEE_SCHEDULE: dict[FeeLevel, int] = {
    FeeLevel.VILLAGE: 99,
    FeeLevel.BLOCK: 199,
    FeeLevel.DISTRICT: 299,
    FeeLevel.HARYANA: 399,
}


class Student(Base):
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("user.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    registration_number: Mapped[str] = mapped_column(
        String(32), unique=True, index=True, nullable=False
    )
    class_name: Mapped[str] = mapped_column(String(64), nullable=False)
    roll_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    father_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    mother_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    city: Mapped[str | None] = mapped_column(String(128), nullable=True)
    state: Mapped[str] = mapped_column(String(128), default="Haryana", nullable=False)
    pincode: Mapped[str | None] = mapped_column(String(16), nullable=True)
    date_of_birth: Mapped[str | None] = mapped_column(String(32), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(16), nullable=True)
    photo_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    fee_level: Mapped[FeeLevel] = mapped_column(
        SqlEnum(FeeLevel, name="fee_level", values_callable=enum_values),
        default=FeeLevel.VILLAGE,
        nullable=False,
    )
    fee_amount: Mapped[int] = mapped_column(Integer, default=99, nullable=False)
    fee_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    payment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="student", lazy="joined")
    admit_cards: Mapped[list["AdmitCard"]] = relationship(
        "AdmitCard",
        back_populates="student",
        cascade="all, delete-orphan",
    )

    @property
    def full_name(self) -> str:
        return self.user.full_name

    @property
    def email(self) -> str:
        return self.user.email

    @property
    def phone(self) -> str | None:
        return self.user.phone
