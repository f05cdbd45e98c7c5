import uuid
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from app.db.models import User

USER_LOAD_OPTIONS = (
    selectinload(User.channels),
    selectinload(User.subscriptions),
)


async def get_user_by_id(db_session: AsyncSession, user_id: uuid.UUID) -> User | None:
    """
    Retrieves a user with owned channels and subscriptions populated.
    """
    result = await db_session.execute(
        select(User)
        .where(User.id == user_id)
        .options(*USER_LOAD_OPTIONS)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_user_by_email(db_session: AsyncSession, email: str) -> User | None:
    """
    Case-insensitive email lookup, matching how accounts are registered.
    """
    result = await db_session.execute(
        select(User)
        .where(func.lower(User.email) == func.lower(email))
        .options(*USER_LOAD_OPTIONS)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()
