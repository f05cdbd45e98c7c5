import asyncio
import io
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional

import cloudinary
import cloudinary.uploader

from ..core.config import settings
from ..core.errors import MediaDeleteError, MediaUploadError

logger = logging.getLogger(__name__)


class MediaKind(str, Enum):
    VIDEO = "video"
    THUMBNAIL = "thumbnail"
    PROFILE = "profile"
    BANNER = "banner"


# Sub-folder under MEDIA_ROOT_FOLDER for each kind
MEDIA_FOLDERS = {
    MediaKind.VIDEO: "videos",
    MediaKind.THUMBNAIL: "thumbnails",
    MediaKind.PROFILE: "profiles",
    MediaKind.BANNER: "channel-banners",
}

# Destroy results that mean the object is gone
_DELETED_RESULTS = {"ok", "not found"}


@dataclass(frozen=True)
class UploadedMedia:
    url: str
    public_id: str
    duration_seconds: int | None = None


def _resource_type(kind: MediaKind) -> str:
    return "video" if kind == MediaKind.VIDEO else "image"


class MediaStore:
    """
    A helper class to store and release media assets on Cloudinary.

    The Cloudinary SDK is blocking, so every network call runs in a worker
    thread; awaiting callers can be cancelled while an upload is in flight.
    """

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        root_folder: str = "youtube-clone",
    ):
        """
        Initialize a media store client.

        :param cloud_name: The Cloudinary cloud name.
        :param api_key: The Cloudinary API key.
        :param api_secret: The Cloudinary API secret.
        :param root_folder: Folder prefix every upload is stored under.
        """
        if not (cloud_name and api_key and api_secret):
            raise ValueError(
                "Must provide cloud_name, api_key and api_secret for Cloudinary."
            )
        self.root_folder = root_folder.strip("/")
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    def folder_for(self, kind: MediaKind) -> str:
        return f"{self.root_folder}/{MEDIA_FOLDERS[kind]}"

    def upload_sync(self, data: bytes, kind: MediaKind) -> Dict[str, Any]:
        return cloudinary.uploader.upload(
            io.BytesIO(data),
            resource_type=_resource_type(kind),
            folder=self.folder_for(kind),
        )

    def destroy_sync(self, public_id: str, kind: MediaKind) -> Dict[str, Any]:
        return cloudinary.uploader.destroy(
            public_id, resource_type=_resource_type(kind), invalidate=True
        )

    async def upload(self, data: bytes, kind: MediaKind) -> UploadedMedia:
        """
        Uploads a byte buffer and returns its durable URL and deletion handle.
        Duration is only reported for videos.

        :raises MediaUploadError: on any transport or service failure.
        """
        try:
            result = await asyncio.to_thread(self.upload_sync, data, kind)
        except Exception as e:
            logger.error("Media upload (%s) failed: %s", kind.value, e)
            raise MediaUploadError(f"Failed to upload {kind.value}") from e

        url = result.get("secure_url") or result.get("url")
        public_id = result.get("public_id")
        if not url or not public_id:
            raise MediaUploadError(f"Failed to upload {kind.value}")

        duration = None
        if kind == MediaKind.VIDEO and result.get("duration") is not None:
            duration = int(float(result["duration"]))

        return UploadedMedia(url=url, public_id=public_id, duration_seconds=duration)

    async def delete(self, public_id: str, kind: MediaKind) -> None:
        """
        Deletes an object by its handle. A handle that is already gone counts
        as deleted.

        :raises MediaDeleteError: when the store could not delete the object.
        """
        try:
            result = await asyncio.to_thread(self.destroy_sync, public_id, kind)
        except Exception as e:
            raise MediaDeleteError(public_id, str(e)) from e

        outcome = (result or {}).get("result")
        if outcome not in _DELETED_RESULTS:
            raise MediaDeleteError(public_id, f"unexpected result {outcome!r}")


class MediaStoreManager:
    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        root_folder: str = "youtube-clone",
    ):
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._root_folder = root_folder
        self._client: Optional[MediaStore] = None

    def init_client(self):
        """
        Create a single MediaStore instance, stored on the manager.
        """
        if not (self._cloud_name and self._api_key and self._api_secret):
            raise ValueError("No Cloudinary credentials provided.")
        self._client = MediaStore(
            cloud_name=self._cloud_name,
            api_key=self._api_key,
            api_secret=self._api_secret,
            root_folder=self._root_folder,
        )

    @contextmanager
    def get_client(self) -> Iterator[MediaStore]:
        """
        Yield the MediaStore client, creating it on first use.
        """
        if self._client is None:
            self.init_client()

        yield self._client


media_store_manager = MediaStoreManager(
    cloud_name=settings.CLOUDINARY_CLOUD_NAME,
    api_key=settings.CLOUDINARY_API_KEY,
    api_secret=settings.CLOUDINARY_API_SECRET,
    root_folder=settings.MEDIA_ROOT_FOLDER,
)


def get_media_store() -> MediaStore:
    """
    A simple dependency that returns the global MediaStore instance.
    """
    # Ensure the manager has been initialized
    if media_store_manager._client is None:
        media_store_manager.init_client()
    return media_store_manager._client
