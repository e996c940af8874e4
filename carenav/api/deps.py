import uuid
from collections.abc import AsyncGenerator

from fastapi import Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from carenav.config import settings
from carenav.db.session import async_session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_session_id(request: Request) -> str | None:
    """Anonymous session id from the cookie, if the browser sent one."""
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def ensure_session_id(request: Request, response: Response) -> str:
    """Return the caller's session id, issuing a new cookie when there is none."""
    session_id = get_session_id(request) or str(uuid.uuid4())
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        max_age=settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.APP_ENV == "production",
        samesite="lax",
    )
    return session_id
