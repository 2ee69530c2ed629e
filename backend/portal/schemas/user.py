from pydantic import BaseModel, EmailStr, Field

from portal.models import FeeLevel, UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class PrincipalRead(BaseModel):
    id: str
    email: str
    role: UserRole
    name: str


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: PrincipalRead


class StudentRegister(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    full_name: str = Field(min_length=1, max_length=255)
    class_name: str = Field(min_length=1, max_length=64)
    phone: str | None = Field(default=None, max_length=32)
    father_name: str | None = None
    mother_name: str | None = None
    address: str | None = None
    city: str | None = None
    pincode: str | None = Field(default=None, max_length=16)
    date_of_birth: str | None = None
    gender: str | None = None
    fee_level: FeeLevel = FeeLevel.VILLAGE


class MemberRegister(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    full_name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=1, max_length=32)
    city: str | None = None
    address: str | None = None
    membership_type: str = "regular"


class StudentRegistered(TokenResponse):
    registration_number: str


class MemberRegistered(TokenResponse):
    membership_number: str
