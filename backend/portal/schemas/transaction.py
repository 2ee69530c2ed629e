from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from portal.models import TransactionStatus, TransactionType


class TransactionCreate(BaseModel):
    type: TransactionType
    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=32)
    amount: int = Field(..., gt=0)
    transaction_id: str = Field(..., min_length=1, max_length=128)
    email: EmailStr | None = None
    payment_method: str | None = None
    purpose: str | None = None
    photo_url: str | None = None


class TransactionDecision(BaseModel):
    status: Literal["approved", "rejected"]
    admin_notes: str | None = None


class TransactionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: TransactionType
    name: str
    email: str | None = None
    phone: str
    amount: int
    transaction_id: str
    payment_method: str | None = None
    purpose: str | None = None
    photo_url: str | None = None
    status: TransactionStatus
    user_id: str | None = None
    student_id: str | None = None
    admin_notes: str | None = None
    approved_by: str | None = None
    approved_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
