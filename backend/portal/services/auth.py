import logging
import secrets
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.errors import AuthenticationError, ConflictError
from portal.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
)
from portal.models import FEE_SCHEDULE, Member, Student, User, UserRole
from portal.schemas import MemberRegister, PrincipalRead, StudentRegister

logger = logging.getLogger(__name__)

_NUMBER_ATTEMPTS = 10


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    stmt = select(User).where(User.email == email.lower())
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def _ensure_email_free(session: AsyncSession, email: str) -> None:
    if await get_user_by_email(session, email):
        raise ConflictError("User with this email already exists")


async def _commit_account(session: AsyncSession) -> None:
    # A concurrent registration can still win the race past _ensure_email_free.
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ConflictError("User with this email already exists") from exc


async def _unique_number(session: AsyncSession, prefix: str, column) -> str:
    year = datetime.now(timezone.utc).year
    for _ in range(_NUMBER_ATTEMPTS):
        candidate = f"{prefix}{year}{secrets.randbelow(100_000):05d}"
        exists = await session.execute(select(column).where(column == candidate))
        if exists.first() is None:
            return candidate
    raise ConflictError("Could not allocate a unique number, try again")


async def create_user(
    session: AsyncSession,
    email: str,
    password: str,
    full_name: str,
    role: UserRole,
    phone: str | None = None,
) -> User:
    await _ensure_email_free(session, email)
    user = User(
        email=email.lower(),
        password_hash=get_password_hash(password),
        full_name=full_name,
        role=role,
        phone=phone,
    )
    session.add(user)
    await _commit_account(session)
    await session.refresh(user)
    return user


async def register_student(
    session: AsyncSession, payload: StudentRegister
) -> tuple[User, Student]:
    await _ensure_email_free(session, payload.email)
    user = User(
        email=payload.email.lower(),
        password_hash=get_password_hash(payload.password),
        full_name=payload.full_name,
        role=UserRole.STUDENT,
        phone=payload.phone,
    )
    student = Student(
        user=user,
        registration_number=await _unique_number(
            session, "STU", Student.registration_number
        ),
        class_name=payload.class_name,
        father_name=payload.father_name,
        mother_name=payload.mother_name,
        address=payload.address,
        city=payload.city,
        pincode=payload.pincode,
        date_of_birth=payload.date_of_birth,
        gender=payload.gender,
        fee_level=payload.fee_level,
        fee_amount=FEE_SCHEDULE[payload.fee_level],
    )
    session.add_all([user, student])
    await _commit_account(session)
    logger.info("Registered student %s (%s)", student.registration_number, user.email)
    return user, student


async def register_member(
    session: AsyncSession, payload: MemberRegister
) -> tuple[User, Member]:
    await _ensure_email_free(session, payload.email)
    user = User(
        email=payload.email.lower(),
        password_hash=get_password_hash(payload.password),
        full_name=payload.full_name,
        role=UserRole.MEMBER,
        phone=payload.phone,
    )
    member = Member(
        user=user,
        membership_number=await _unique_number(session, "MEM", Member.membership_number),
        membership_type=payload.membership_type,
        address=payload.address,
        city=payload.city,
    )
    session.add_all([user, member])
    await _commit_account(session)
    logger.info("Registered member %s (%s)", member.membership_number, user.email)
    return user, member


async def authenticate_user(
    session: AsyncSession, email: str, password: str, role: UserRole
) -> User:
    user = await get_user_by_email(session, email)
    if (
        not user
        or user.role != role
        or not user.is_active
        or not verify_password(password, user.password_hash)
    ):
        raise AuthenticationError("Invalid email or password")
    return user


async def ensure_admin(session: AsyncSession, email: str, password: str) -> User:
    existing = await get_user_by_email(session, email)
    if existing:
        return existing
    user = await create_user(session, email, password, "Administrator", UserRole.ADMIN)
    logger.info("Created bootstrap admin %s", user.email)
    return user


def principal_for(user: User) -> PrincipalRead:
    return PrincipalRead(id=user.id, email=user.email, role=user.role, name=user.full_name)


def create_token_for_user(user: User) -> str:
    return create_access_token(subject=user.id, role=user.role.value)
