from portal.schemas.admit_card import AdmitCardCreate, AdmitCardRead
from portal.schemas.gallery import GalleryImageCreate, GalleryImageRead, GalleryImageUpdate
from portal.schemas.storage import UploadPutResponse, UploadURLRequest, UploadURLResponse
from portal.schemas.student import FeeSummary, StudentRead, StudentUpdate
from portal.schemas.transaction import TransactionCreate, TransactionDecision, TransactionRead
from portal.schemas.user import (
    LoginRequest,
    MemberRegister,
    MemberRegistered,
    PrincipalRead,
    StudentRegister,
    StudentRegistered,
    TokenResponse,
)

__all__ = [
    "LoginRequest",
    "PrincipalRead",
    "TokenResponse",
    "StudentRegister",
    "StudentRegistered",
    "MemberRegister",
    "MemberRegistered",
    "StudentRead",
    "StudentUpdate",
    "FeeSummary",
    "GalleryImageCreate",
    "GalleryImageUpdate",
    "GalleryImageRead",
    "AdmitCardCreate",
    "AdmitCardRead",
    "TransactionCreate",
    "TransactionDecision",
    "TransactionRead",
    "UploadURLRequest",
    "UploadURLResponse",
    "UploadPutResponse",
]
