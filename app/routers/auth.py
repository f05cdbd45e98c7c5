from fastapi import APIRouter, File, Form, UploadFile, status

from ..auth.schemas import LoginOut, LoginRequest, RegisterOut, UserRead
from ..clients.media_store import MediaKind
from ..dependencies import (
    CurrentUserDep,
    DBSessionDep,
    MediaStoreDep,
    StrategyDep,
    UserManagerDep,
)
from ..services import auth_service, media_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register", response_model=RegisterOut, status_code=status.HTTP_201_CREATED
)
async def register(
    db_session: DBSessionDep,
    user_manager: UserManagerDep,
    media_store: MediaStoreDep,
    username: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    profile_pic: UploadFile | None = File(None),
):
    """
    Creates an account. The optional profile picture is uploaded first.
    """
    profile_data = await media_service.read_upload(profile_pic, MediaKind.PROFILE)
    user = await auth_service.register(
        username,
        email,
        password,
        db_session=db_session,
        user_manager=user_manager,
        media_store=media_store,
        profile_pic=profile_data,
    )
    return {"message": "User registered successfully", "user": user}


@router.post("/login", response_model=LoginOut)
async def login(
    credentials: LoginRequest,
    db_session: DBSessionDep,
    user_manager: UserManagerDep,
    strategy: StrategyDep,
):
    """
    Exchanges email and password for a bearer token.
    """
    user, token = await auth_service.login(
        credentials, db_session, user_manager, strategy
    )
    return {"message": "Login successful", "token": token, "user": user}


@router.get("/me", response_model=UserRead)
async def get_me(db_session: DBSessionDep, user: CurrentUserDep):
    return await auth_service.get_user_by_id(user.id, db_session)


@router.put("/me", response_model=UserRead)
async def update_me(
    db_session: DBSessionDep,
    media_store: MediaStoreDep,
    user: CurrentUserDep,
    username: str | None = Form(None, max_length=64),
    profile_pic: UploadFile | None = File(None),
):
    """
    Changes the caller's username and/or profile picture.
    """
    profile_data = await media_service.read_upload(profile_pic, MediaKind.PROFILE)
    return await auth_service.update_profile(
        user,
        db_session,
        media_store,
        username=username,
        profile_pic=profile_data,
    )
