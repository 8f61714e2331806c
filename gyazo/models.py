"""Data models for Gyazo content."""

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import Config

# Attributed as the uploading application unless overridden
DEFAULT_APP = "https://github.com/brooke-eva/gyazo"

MEDIA_URL = "https://i.gyazo.com"


def _field(data: dict[str, Any], key: str, kind: type) -> Any:
    """Required field of an exact JSON type; KeyError/TypeError otherwise."""
    value = data[key]
    if not isinstance(value, kind):
        raise TypeError(f"field {key!r} must be {kind.__name__}, got {type(value).__name__}")
    return value


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"field {key!r} must be str, got {type(value).__name__}")
    return value


@dataclass
class Metadata:
    """Metadata attached to an uploaded file.

    An empty string and a missing value mean the same thing here.
    """

    app: str | None = None
    title: str | None = None
    url: str | None = None
    desc: str = ""

    @property
    def is_empty(self) -> bool:
        """True if no field carries a value."""
        return not (self.app or self.title or self.url or self.desc)

    def to_dict(self) -> dict[str, str]:
        """Serialize, omitting absent and empty fields."""
        fields = {"app": self.app, "title": self.title, "url": self.url, "desc": self.desc}
        return {key: value for key, value in fields.items() if value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Metadata":
        """Create Metadata from the ``metadata`` object of an image."""
        return cls(
            app=_optional_str(data, "app"),
            title=_optional_str(data, "title"),
            url=_optional_str(data, "url"),
            desc=_optional_str(data, "desc") or "",
        )


@dataclass
class Ocr:
    """Text recognized in an image by the Gyazo service."""

    locale: str
    description: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Ocr":
        return cls(
            locale=_field(data, "locale", str),
            description=_field(data, "description", str),
        )


@dataclass
class File:
    """Normalized view of a stored image or video."""

    id: str
    file_type: str
    created_at: str
    download: str
    permalink: str
    meta: Metadata | None = None

    @property
    def name(self) -> str:
        """Default filename for downloads."""
        return f"{self.id}.{self.file_type}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for output; ``meta`` is left out when absent."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.file_type,
            "created_at": self.created_at,
            "download": self.download,
            "permalink": self.permalink,
        }
        if self.meta is not None:
            data["meta"] = self.meta.to_dict()
        return data


@dataclass
class Image:
    """Image as returned by the Gyazo API."""

    image_id: str
    permalink_url: str
    file_type: str  # "png", "jpg", "gif", "mp4", ...
    created_at: str  # ISO-8601, e.g. "2018-07-24T07:33:24.771Z"
    thumb_url: str | None = None
    metadata: Metadata | None = None
    ocr: Ocr | None = None

    @property
    def download_url(self) -> str:
        """Direct URL of the stored file, derived from id and type."""
        if self.file_type == "mp4":
            return f"{MEDIA_URL}/download/{self.image_id}.mp4"
        return f"{MEDIA_URL}/{self.image_id}.{self.file_type}"

    @property
    def probe_url(self) -> str:
        """URL that only exists when the file is really an MP4 video."""
        return f"{MEDIA_URL}/download/{self.image_id}.mp4"

    def to_file(self) -> File:
        """Normalize into a File using the current file type.

        The thumbnail and OCR results are dropped, and metadata is dropped
        entirely when it carries no values.
        """
        meta = self.metadata
        if meta is not None and meta.is_empty:
            meta = None

        return File(
            id=self.image_id,
            file_type=self.file_type,
            created_at=self.created_at,
            download=self.download_url,
            permalink=self.permalink_url,
            meta=meta,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Image":
        """Create Image from Gyazo API response."""
        metadata = data.get("metadata")
        ocr = data.get("ocr")
        return cls(
            image_id=_field(data, "image_id", str),
            permalink_url=_field(data, "permalink_url", str),
            file_type=_field(data, "type", str),
            created_at=_field(data, "created_at", str),
            thumb_url=_optional_str(data, "thumb_url"),
            metadata=Metadata.from_dict(metadata) if metadata is not None else None,
            ocr=Ocr.from_dict(ocr) if ocr is not None else None,
        )

    @classmethod
    def list_from(cls, data: list[Any]) -> list["Image"]:
        """Create a list of Images from a page of the listing API."""
        if not isinstance(data, list):
            raise TypeError(f"expected a JSON array, got {type(data).__name__}")
        return [cls.from_dict(item) for item in data]


@dataclass
class User:
    """Account that owns the access token."""

    email: str
    is_pro: bool
    is_team: bool
    name: str
    profile_image: str
    uid: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "is_pro": self.is_pro,
            "is_team": self.is_team,
            "name": self.name,
            "profile_image": self.profile_image,
            "uid": self.uid,
        }

    @classmethod
    def from_envelope(cls, data: dict[str, Any]) -> "User":
        """Create User from the ``{"user": {...}}`` response of /users/me."""
        user = data["user"]
        return cls(
            email=_field(user, "email", str),
            is_pro=_field(user, "is_pro", bool),
            is_team=_field(user, "is_team", bool),
            name=_field(user, "name", str),
            profile_image=_field(user, "profile_image", str),
            uid=_field(user, "uid", str),
        )


@dataclass(frozen=True)
class Upload:
    """How an upload should be attributed and shown."""

    app: str = DEFAULT_APP
    public_metadata: bool = False
    anonymous: bool = False  # Do not send the device ID

    @classmethod
    def from_config(cls, config: "Config") -> "Upload":
        """Build upload defaults from a loaded configuration."""
        return cls(
            app=config.upload_app or DEFAULT_APP,
            public_metadata=config.upload_public_metadata,
        )

    def with_overrides(
        self,
        app: str | None = None,
        public_metadata: bool | None = None,
        anonymous: bool | None = None,
    ) -> "Upload":
        """Return a copy with the given values replaced."""
        changes: dict[str, Any] = {}
        if app is not None:
            changes["app"] = app
        if public_metadata is not None:
            changes["public_metadata"] = public_metadata
        if anonymous is not None:
            changes["anonymous"] = anonymous
        return replace(self, **changes)


@dataclass
class CgiUpload:
    """Result of an upload through upload.cgi."""

    url: str
    device: str  # Device ID the upload was attributed to
