from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.errors import NotFoundError
from portal.models import AdmitCard, Student
from portal.schemas import AdmitCardCreate


async def create_admit_card(session: AsyncSession, payload: AdmitCardCreate) -> AdmitCard:
    if not await session.get(Student, payload.student_id):
        raise NotFoundError("Student not found")
    card = AdmitCard(**payload.model_dump())
    session.add(card)
    await session.commit()
    await session.refresh(card)
    return card


async def list_admit_cards(
    session: AsyncSession, student_id: str | None = None
) -> list[AdmitCard]:
    stmt = select(AdmitCard).order_by(AdmitCard.uploaded_at.desc())
    if student_id:
        stmt = stmt.where(AdmitCard.student_id == student_id)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def delete_admit_card(session: AsyncSession, card_id: str) -> None:
    card = await session.get(AdmitCard, card_id)
    if not card:
        raise NotFoundError("Admit card not found")
    await session.delete(card)
    await session.commit()
