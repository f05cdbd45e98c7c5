from typing import Annotated

from .db.session import get_db_session
from arq.connections import ArqRedis
from fastapi import Depends
from fastapi_users.authentication import Strategy
from sqlalchemy.ext.asyncio import AsyncSession
from .clients.media_store import get_media_store, MediaStore
from .queue import get_arq_redis
from .auth.backend import auth_backend
from .auth.deps import current_active_user
from .auth.manager import UserManager, get_user_manager
from .auth.models import User


DBSessionDep = Annotated[AsyncSession, Depends(get_db_session)]

MediaStoreDep = Annotated[MediaStore, Depends(get_media_store)]

ArqDep = Annotated[ArqRedis, Depends(get_arq_redis)]

CurrentUserDep = Annotated[User, Depends(current_active_user)]

UserManagerDep = Annotated[UserManager, Depends(get_user_manager)]

StrategyDep = Annotated[Strategy, Depends(auth_backend.get_strategy)]
