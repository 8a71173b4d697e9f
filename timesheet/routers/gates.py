"""Authorization gates for route handlers.

Handlers take the caller id from ``require_user`` or ``require_admin``, so
the gate completes before the body is validated and the handler runs.
"""
from fastapi import Depends, HTTPException, status

from timesheet.database import get_database
from timesheet.errors import AuthError
from timesheet.routers.auth import get_current_user_id
from timesheet.services.auth_service import AuthService


def _auth_exception(error: AuthError) -> HTTPException:
    if error.admin_required:
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error.code)
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=error.code)


async def require_user(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
) -> str:
    """Gate: caller is a known, active user."""
    try:
        await AuthService(db).require_authenticated(user_id)
    except AuthError as e:
        raise _auth_exception(e)
    return user_id


async def require_admin(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
) -> str:
    """Gate: caller is an active administrator."""
    try:
        await AuthService(db).require_admin(user_id)
    except AuthError as e:
        raise _auth_exception(e)
    return user_id
