from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import User


async def get_user(db: AsyncSession, user_id: str) -> Optional[User]:
    """Get a user by Firebase UID."""
    return await db.get(User, user_id)


async def get_or_create_user(
    db: AsyncSession,
    user_id: str,
    email: Optional[str] = None,
    display_name: Optional[str] = None,
) -> User:
    """Return the user row, creating it on first sight of a UID."""
    db_user = await db.get(User, user_id)
    if db_user:
        if display_name and db_user.display_name != display_name:
            db_user.display_name = display_name
            await db.commit()
            await db.refresh(db_user)
        return db_user

    db_user = User(id=user_id, email=email, display_name=display_name)
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)
    return db_user
