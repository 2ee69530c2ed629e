from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.deps import get_db, require_admin, require_student
from portal.models import User
from portal.schemas import AdmitCardCreate, AdmitCardRead
from portal.services import admit_cards as admit_card_service
from portal.services import students as student_service

router = APIRouter(prefix="/api", tags=["admit-cards"])
admin_router = APIRouter(
    prefix="/api/admin/admit-cards",
    tags=["admit-cards"],
    dependencies=[Depends(require_admin)],
)


@admin_router.post("", response_model=AdmitCardRead, status_code=status.HTTP_201_CREATED)
async def create_admit_card(
    payload: AdmitCardCreate,
    session: AsyncSession = Depends(get_db),
) -> AdmitCardRead:
    card = await admit_card_service.create_admit_card(session, payload)
    return AdmitCardRead.model_validate(card)


@admin_router.get("", response_model=list[AdmitCardRead])
async def list_admit_cards(
    student_id: str | None = None,
    session: AsyncSession = Depends(get_db),
) -> list[AdmitCardRead]:
    cards = await admit_card_service.list_admit_cards(session, student_id)
    return [AdmitCardRead.model_validate(card) for card in cards]


@admin_router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_admit_card(
    card_id: str,
    session: AsyncSession = Depends(get_db),
) -> Response:
    await admit_card_service.delete_admit_card(session, card_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/my-admit-cards", response_model=list[AdmitCardRead])
async def list_my_admit_cards(
    session: AsyncSession = Depends(get_db),
    user: User = Depends(require_student),
) -> list[AdmitCardRead]:
    student = await student_service.get_student_for_user(session, user.id)
    if not student:
        return []
    cards = await admit_card_service.list_admit_cards(session, student.id)
    return [AdmitCardRead.model_validate(card) for card in cards]
