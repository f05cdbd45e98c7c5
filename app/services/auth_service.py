import logging

from fastapi_users import exceptions
from fastapi_users.authentication import Strategy
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.manager import UserManager
from ..auth.models import User
from ..auth.schemas import LoginRequest, UserCreate
from ..clients.media_store import MediaKind, MediaStore
from ..core.config import settings
from ..core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from ..db.crud import crud_user
from . import media_service

logger = logging.getLogger(__name__)


async def get_user_by_id(user_id, db_session: AsyncSession) -> User:
    user = await crud_user.get_user_by_id(db_session, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


async def register(
    username: str,
    email: str,
    password: str,
    db_session: AsyncSession,
    user_manager: UserManager,
    media_store: MediaStore,
    profile_pic: bytes | None = None,
) -> User:
    """
    Orchestrates registering a user.
    1. Rejects emails already in use before anything is uploaded.
    2. Uploads the profile picture, if any.
    3. Creates the user through the user manager, which hashes the password.
    """
    try:
        user_create = UserCreate(username=username, email=email, password=password)
    except SchemaValidationError as e:
        raise ValidationError(str(e.errors()[0]["msg"])) from e

    if await crud_user.get_user_by_email(db_session, user_create.email):
        raise ConflictError("Email already in use")

    uploaded = None
    if profile_pic is not None:
        uploaded = await media_store.upload(profile_pic, MediaKind.PROFILE)
        user_create.profile_pic_url = uploaded.url
        user_create.profile_pic_public_id = uploaded.public_id

    try:
        user = await user_manager.create(user_create, safe=True)
    except (exceptions.UserAlreadyExists, exceptions.InvalidPasswordException) as e:
        await db_session.rollback()
        if uploaded:
            await media_service.discard_uploads(
                media_store, db_session, [(uploaded, MediaKind.PROFILE)], "registration rejected"
            )
        if isinstance(e, exceptions.UserAlreadyExists):
            raise ConflictError("Email already in use") from e
        raise ValidationError(e.reason) from e
    except Exception:
        await db_session.rollback()
        if uploaded:
            await media_service.discard_uploads(
                media_store, db_session, [(uploaded, MediaKind.PROFILE)], "registration failed"
            )
        raise

    return await get_user_by_id(user.id, db_session)


async def login(
    credentials: LoginRequest,
    db_session: AsyncSession,
    user_manager: UserManager,
    strategy: Strategy,
) -> tuple[User, str]:
    """
    Verifies the credentials and issues a bearer token.

    An unknown email is a 404 and a wrong password a 401, unless
    AUTH_UNIFORM_LOGIN_ERRORS is set, in which case both are a 401.
    """
    user = await crud_user.get_user_by_email(db_session, credentials.email)
    if user is None:
        if settings.AUTH_UNIFORM_LOGIN_ERRORS:
            # Hash anyway so both failures take about as long
            user_manager.password_helper.hash(credentials.password)
            raise AuthError("Invalid credentials")
        raise NotFoundError("User not found")

    verified, updated_hash = user_manager.password_helper.verify_and_update(
        credentials.password, user.hashed_password
    )
    if not verified:
        raise AuthError("Invalid credentials")
    if not user.is_active:
        raise AuthError("Inactive user")
    if updated_hash is not None:
        await user_manager.user_db.update(user, {"hashed_password": updated_hash})

    token = await strategy.write_token(user)
    logger.info("User %s logged in", user.id)
    return await get_user_by_id(user.id, db_session), token


async def update_profile(
    user: User,
    db_session: AsyncSession,
    media_store: MediaStore,
    username: str | None = None,
    profile_pic: bytes | None = None,
) -> User:
    """
    Changes the username and/or profile picture of the caller. The old picture
    is released once the new one is committed.
    """
    user = await get_user_by_id(user.id, db_session)

    uploaded = None
    old_pic_id = None
    if profile_pic is not None:
        uploaded = await media_store.upload(profile_pic, MediaKind.PROFILE)
        old_pic_id = user.profile_pic_public_id
        user.profile_pic_url = uploaded.url
        user.profile_pic_public_id = uploaded.public_id

    if username and username.strip():
        user.username = username.strip()

    try:
        await db_session.commit()
    except Exception:
        await db_session.rollback()
        if uploaded:
            await media_service.discard_uploads(
                media_store, db_session, [(uploaded, MediaKind.PROFILE)], "profile update failed"
            )
        raise

    if old_pic_id:
        await media_service.release_media(
            media_store,
            db_session,
            [(old_pic_id, MediaKind.PROFILE)],
            f"profile picture of user {user.id} replaced",
        )
        await db_session.commit()

    return await get_user_by_id(user.id, db_session)
