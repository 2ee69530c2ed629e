from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.errors import AuthenticationError, AuthorizationError
from portal.core.security import TokenError, decode_access_token
from portal.db.session import get_session_factory
from portal.models import User, UserRole
from portal.services.storage import UploadStore

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/admin/login", auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    session_factory = get_session_factory()
    async with session_factory() as session:
        yield session


async def _resolve_user(token: str, session: AsyncSession) -> User:
    try:
        claims = decode_access_token(token)
    except TokenError:
        raise AuthenticationError("Could not validate credentials") from None

    user = await session.get(User, claims.subject)
    if not user or not user.is_active:
        raise AuthenticationError("User not found")
    # A token only speaks for the role it was issued under.
    if user.role.value != claims.role:
        raise AuthenticationError("Invalid token payload")
    return user


async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_db),
) -> User:
    if not token:
        raise AuthenticationError("Not authenticated")
    return await _resolve_user(token, session)


async def get_optional_user(
    token: str | None = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_db),
) -> User | None:
    if not token:
        return None
    return await _resolve_user(token, session)


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.ADMIN:
        raise AuthorizationError("Admin access required")
    return current_user


async def require_student(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.STUDENT:
        raise AuthorizationError("Student access required")
    return current_user


def get_upload_store(request: Request) -> UploadStore:
    return request.app.state.upload_store
