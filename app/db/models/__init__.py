from .channel import Channel
from .video import Video
from .comment import Comment
from .media_orphan import MediaOrphan
from app.auth.models import User

__all__ = [
    "User",
    "Channel",
    "Video",
    "Comment",
    "MediaOrphan",
]
