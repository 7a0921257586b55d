"""
Signed upload parameters for the image host (Cloudinary).

Clients upload media straight to the image host; the API only signs
the upload parameters so the host accepts them.  Each media context has
its own upload preset and its own role requirement.

The signature follows the image host's scheme: the parameters are
sorted by name, joined as ``key=value`` pairs with ``&``, the API
secret is appended and the result is hashed with SHA-1.
"""

import hashlib
import logging
import time
from enum import Enum
from typing import Dict, FrozenSet, Mapping, Optional

from ..core.config import Settings
from ..core.errors import Forbidden, MissingToken, UpstreamError
from ..core.security import CurrentUser
from ..schemas.upload import UploadSignature
from ..schemas.user import Role

logger = logging.getLogger(__name__)


class UploadContext(str, Enum):
    POST = "post"
    PARTY = "party"
    EVENT = "event"
    PROFILE_PHOTO = "profile-photo"


UPLOAD_PRESETS: Dict[UploadContext, str] = {
    UploadContext.POST: "Post",
    UploadContext.PARTY: "Party",
    UploadContext.EVENT: "Event",
    UploadContext.PROFILE_PHOTO: "ProfilePhoto",
}

# ``None`` means the context is open to anonymous callers (profile
# photos are uploaded during registration, before any login).
UPLOAD_ROLES: Dict[UploadContext, Optional[FrozenSet[Role]]] = {
    UploadContext.POST: frozenset({Role.BASE_USER}),
    UploadContext.PARTY: frozenset({Role.BASE_USER}),
    UploadContext.EVENT: frozenset({Role.ORGANIZER}),
    UploadContext.PROFILE_PHOTO: None,
}


def sign_params(params: Mapping[str, object], api_secret: str) -> str:
    """Return the hex SHA-1 signature of ``params`` for the image host."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, ""))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class UploadService:
    """Issue signed upload parameters per media context."""

    @classmethod
    def check_access(cls, context: UploadContext, current_user: Optional[CurrentUser]) -> None:
        roles = UPLOAD_ROLES[context]
        if roles is None:
            return
        if current_user is None:
            raise MissingToken()
        if current_user.role not in roles:
            raise Forbidden(f"Not authorized to upload {context.value} media")

    @classmethod
    def sign_upload(
        cls,
        settings: Settings,
        context: UploadContext,
        current_user: Optional[CurrentUser] = None,
        timestamp: Optional[int] = None,
    ) -> UploadSignature:
        cls.check_access(context, current_user)
        if not settings.cloud_api_secret or not settings.cloud_api_key:
            logger.error("Upload signing requested but image host credentials are not configured")
            raise UpstreamError("Image host is not configured")
        timestamp = timestamp if timestamp is not None else int(time.time())
        upload_preset = UPLOAD_PRESETS[context]
        signature = sign_params({"timestamp": timestamp, "upload_preset": upload_preset}, settings.cloud_api_secret)
        return UploadSignature(
            signature=signature,
            timestamp=timestamp,
            upload_preset=upload_preset,
            api_key=settings.cloud_api_key,
            cloud_name=settings.cloud_name,
        )
