from datetime import datetime, timezone

from sqlalchemy import case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.errors import NotFoundError
from portal.models import FEE_SCHEDULE, Student, User
from portal.schemas import FeeSummary, StudentUpdate


async def list_students(
    session: AsyncSession,
    fee_status: str | None = None,
    search: str | None = None,
) -> list[Student]:
    stmt = select(Student).join(Student.user).order_by(Student.created_at.desc())
    if fee_status == "paid":
        stmt = stmt.where(Student.fee_paid.is_(True))
    elif fee_status == "pending":
        stmt = stmt.where(Student.fee_paid.is_(False))
    if search:
        pattern = f"%{search.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(User.full_name).like(pattern),
                func.lower(Student.registration_number).like(pattern),
            )
        )
    result = await session.execute(stmt)
    return list(result.scalars().unique().all())


async def get_student(session: AsyncSession, student_id: str) -> Student:
    student = await session.get(Student, student_id)
    if not student:
        raise NotFoundError("Student not found")
    return student


async def get_student_for_user(session: AsyncSession, user_id: str) -> Student | None:
    stmt = select(Student).where(Student.user_id == user_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


def mark_fee_paid(student: Student, paid_at: datetime | None = None) -> None:
    student.fee_paid = True
    student.payment_date = paid_at or datetime.now(timezone.utc)


async def update_student(
    session: AsyncSession, student_id: str, payload: StudentUpdate
) -> Student:
    student = await get_student(session, student_id)
    changes = payload.model_dump(exclude_unset=True)

    fee_level = changes.pop("fee_level", None)
    if fee_level is not None:
        student.fee_level = fee_level
        student.fee_amount = FEE_SCHEDULE[fee_level]

    fee_paid = changes.pop("fee_paid", None)
    payment_date = changes.pop("payment_date", None)
    if fee_paid is True:
        mark_fee_paid(student, payment_date)
    elif fee_paid is False:
        student.fee_paid = False
        student.payment_date = None
    elif payment_date is not None:
        student.payment_date = payment_date

    for field, value in changes.items():
        setattr(student, field, value)

    await session.commit()
    await session.refresh(student)
    return student


async def fee_summary(session: AsyncSession) -> FeeSummary:
    stmt = select(
        func.count(Student.id),
        func.coalesce(func.sum(case((Student.fee_paid.is_(True), 1), else_=0)), 0),
        func.coalesce(
            func.sum(case((Student.fee_paid.is_(True), Student.fee_amount), else_=0)), 0
        ),
    )
    total, paid, collected = (await session.execute(stmt)).one()
    return FeeSummary(
        total_students=total,
        paid_count=paid,
        pending_count=total - paid,
        total_collected=collected,
    )
