import asyncio

from fastapi import Depends, HTTPException, Request, status, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import auth
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.database import get_db
from app import crud, schemas
from app.utils.logger import get_logger

logger = get_logger(__name__)

async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
    db: AsyncSession = Depends(get_db)
) -> schemas.CurrentUser:
    """
    Verify Firebase ID token and get essential user information.
    Falls back to the X-User-ID header only when ALLOW_USER_ID_HEADER is enabled.

    Args:
        request: The incoming request; the user id is stored on request.state for rate limiting.
        credentials: The HTTP Authorization credentials.
        x_user_id: Optional X-User-ID header value.
        db: The database session.

    Returns:
        CurrentUser: Simplified user object with id, email and display_name

    Raises:
        HTTPException: 401 if no usable credentials were sent or they are invalid
    """
    use_header = x_user_id is not None and settings.ALLOW_USER_ID_HEADER
    if credentials is None and not use_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User must be authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if credentials:
        try:
            # verify_id_token may fetch public keys over HTTP
            decoded_token = await asyncio.to_thread(auth.verify_id_token, credentials.credentials)
        except Exception as firebase_error:
            logger.warning(f"Rejected Firebase ID token: {firebase_error}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid token: {str(firebase_error)}",
                headers={"WWW-Authenticate": "Bearer"},
            )
        user_id = decoded_token.get("uid")
        db_user = await crud.get_or_create_user(
            db, user_id, decoded_token.get("email"), decoded_token.get("name")
        )
    else:
        user_id = x_user_id
        db_user = await crud.get_user(db, user_id)
        if not db_user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid X-User-ID",
            )

    request.state.user_id = user_id
    return schemas.CurrentUser(
        id=user_id,
        email=db_user.email,
        display_name=db_user.display_name,
    )
