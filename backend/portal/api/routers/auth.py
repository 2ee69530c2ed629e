from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.deps import get_current_user, get_db
from portal.models import User, UserRole
from portal.schemas import (
    LoginRequest,
    MemberRegister,
    MemberRegistered,
    PrincipalRead,
    StudentRegister,
    StudentRegistered,
    TokenResponse,
)
from portal.services import auth as auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


async def _login(session: AsyncSession, payload: LoginRequest, role: UserRole) -> TokenResponse:
    user = await auth_service.authenticate_user(session, payload.email, payload.password, role)
    return TokenResponse(
        token=auth_service.create_token_for_user(user),
        user=auth_service.principal_for(user),
    )


@router.post("/admin/login", response_model=TokenResponse)
async def admin_login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db),
) -> TokenResponse:
    return await _login(session, payload, UserRole.ADMIN)


@router.post("/student/login", response_model=TokenResponse)
async def student_login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db),
) -> TokenResponse:
    return await _login(session, payload, UserRole.STUDENT)


@router.post("/member/login", response_model=TokenResponse)
async def member_login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db),
) -> TokenResponse:
    return await _login(session, payload, UserRole.MEMBER)


@router.post(
    "/student/register",
    response_model=StudentRegistered,
    status_code=status.HTTP_201_CREATED,
)
async def register_student(
    payload: StudentRegister,
    session: AsyncSession = Depends(get_db),
) -> StudentRegistered:
    user, student = await auth_service.register_student(session, payload)
    return StudentRegistered(
        token=auth_service.create_token_for_user(user),
        user=auth_service.principal_for(user),
        registration_number=student.registration_number,
    )


@router.post(
    "/member/register",
    response_model=MemberRegistered,
    status_code=status.HTTP_201_CREATED,
)
async def register_member(
    payload: MemberRegister,
    session: AsyncSession = Depends(get_db),
) -> MemberRegistered:
    user, member = await auth_service.register_member(session, payload)
    return MemberRegistered(
        token=auth_service.create_token_for_user(user),
        user=auth_service.principal_for(user),
        membership_number=member.membership_number,
    )


@router.get("/me", response_model=PrincipalRead)
async def get_me(current_user: User = Depends(get_current_user)) -> PrincipalRead:
    return auth_service.principal_for(current_user)
