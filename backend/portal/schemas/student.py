from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from portal.models import FeeLevel


class StudentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    email: str
    full_name: str
    phone: str | None = None
    registration_number: str
    class_name: str
    roll_number: str | None = None
    father_name: str | None = None
    mother_name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str
    pincode: str | None = None
    date_of_birth: str | None = None
    gender: str | None = None
    photo_url: str | None = None
    fee_level: FeeLevel
    fee_amount: int
    fee_paid: bool
    payment_date: datetime | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class StudentUpdate(BaseModel):
    fee_paid: bool | None = None
    payment_date: datetime | None = None
    fee_level: FeeLevel | None = None
    roll_number: str | None = None
    class_name: str | None = None
    photo_url: str | None = None
    is_active: bool | None = None

    @field_validator("class_name", "is_active")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class FeeSummary(BaseModel):
    total_students: int
    paid_count: int
    pending_count: int
    total_collected: int
