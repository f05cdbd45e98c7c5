from fastapi import APIRouter, status

from ..dependencies import CurrentUserDep, DBSessionDep
from ..schemas.base import MessageOut
from ..schemas.comment import (
    CommentCreate,
    CommentMessageOut,
    CommentOut,
    CommentUpdate,
)
from ..services import comment_service

router = APIRouter(prefix="/api/videos/{video_id}/comments", tags=["Comments"])


@router.get("", response_model=list[CommentOut])
async def list_comments(video_id: str, db_session: DBSessionDep):
    """
    Lists the video's comments, newest first, with author names.
    """
    return await comment_service.get_comments_for_video(video_id, db_session)


@router.post(
    "", response_model=CommentMessageOut, status_code=status.HTTP_201_CREATED
)
async def add_comment(
    video_id: str,
    payload: CommentCreate,
    db_session: DBSessionDep,
    user: CurrentUserDep,
):
    comment = await comment_service.add_comment(video_id, payload, user.id, db_session)
    return {"message": "Comment added successfully", "comment": comment}


@router.put("/{comment_id}", response_model=CommentMessageOut)
async def edit_comment(
    video_id: str,
    comment_id: str,
    payload: CommentUpdate,
    db_session: DBSessionDep,
    user: CurrentUserDep,
):
    """
    Edits a comment. Only its author may do this.
    """
    comment = await comment_service.edit_comment(
        video_id, comment_id, payload, user.id, db_session
    )
    return {"message": "Comment updated successfully", "comment": comment}


@router.delete("/{comment_id}", response_model=MessageOut)
async def delete_comment(
    video_id: str, comment_id: str, db_session: DBSessionDep, user: CurrentUserDep
):
    await comment_service.delete_comment(video_id, comment_id, user.id, db_session)
    return {"message": "Comment deleted successfully"}
