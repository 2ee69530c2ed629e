from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.deps import get_db, require_admin, require_student
from portal.core.errors import NotFoundError
from portal.models import User
from portal.schemas import FeeSummary, StudentRead, StudentUpdate
from portal.services import students as student_service

router = APIRouter(prefix="/api", tags=["students"])


@router.get(
    "/students",
    response_model=list[StudentRead],
    dependencies=[Depends(require_admin)],
)
async def list_students(
    fee_status: Literal["paid", "pending"] | None = Query(default=None),
    search: str | None = Query(default=None, max_length=100),
    session: AsyncSession = Depends(get_db),
) -> list[StudentRead]:
    students = await student_service.list_students(session, fee_status, search)
    return [StudentRead.model_validate(student) for student in students]


@router.get(
    "/students/{student_id}",
    response_model=StudentRead,
    dependencies=[Depends(require_admin)],
)
async def get_student(
    student_id: str,
    session: AsyncSession = Depends(get_db),
) -> StudentRead:
    student = await student_service.get_student(session, student_id)
    return StudentRead.model_validate(student)


@router.patch(
    "/students/{student_id}",
    response_model=StudentRead,
    dependencies=[Depends(require_admin)],
)
async def update_student(
    student_id: str,
    payload: StudentUpdate,
    session: AsyncSession = Depends(get_db),
) -> StudentRead:
    student = await student_service.update_student(session, student_id, payload)
    return StudentRead.model_validate(student)


@router.get(
    "/fees/summary",
    response_model=FeeSummary,
    dependencies=[Depends(require_admin)],
)
async def get_fee_summary(session: AsyncSession = Depends(get_db)) -> FeeSummary:
    return await student_service.fee_summary(session)


@router.get("/my-profile", response_model=StudentRead)
async def get_my_profile(
    session: AsyncSession = Depends(get_db),
    user: User = Depends(require_student),
) -> StudentRead:
    student = await student_service.get_student_for_user(session, user.id)
    if not student:
        raise NotFoundError("Student profile not found")
    return StudentRead.model_validate(student)
