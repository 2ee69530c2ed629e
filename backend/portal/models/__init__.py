from portal.models.admit_card import AdmitCard
from portal.models.gallery_image import GalleryCategory, GalleryImage
from portal.models.member import Member
from portal.models.payment_transaction import (
    PaymentTransaction,
    TransactionStatus,
    TransactionType,
)
from portal.models.student import FEE_SCHEDULE, FeeLevel, Student
from portal.models.user import User, UserRole

__all__ = [
    "User",
    "UserRole",
    "Student",
    "FeeLevel",
    "FEE_SCHEDULE",
    "Member",
    "GalleryImage",
    "GalleryCategory",
    "AdmitCard",
    "PaymentTransaction",
    "TransactionType",
    "TransactionStatus",
]
