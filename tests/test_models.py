"""Tests for gyazo data models."""

import pytest

from gyazo.config import Config
from gyazo.models import DEFAULT_APP, File, Image, Metadata, Upload, User

# ------------------------------------------------------------------
# Image.download_url
# ------------------------------------------------------------------


class TestDownloadUrl:
    """Tests for the URL derived from id and file type."""

    @pytest.mark.parametrize("file_type", ["png", "jpg", "gif"])
    def test_image_types(self, file_type: str) -> None:
        image = Image("abc123", "https://gyazo.com/abc123", file_type, "2024-01-01T00:00:00Z")
        assert image.download_url == f"https://i.gyazo.com/abc123.{file_type}"

    def test_mp4_uses_download_path(self) -> None:
        image = Image("abc123", "https://gyazo.com/abc123", "mp4", "2024-01-01T00:00:00Z")
        assert image.download_url == "https://i.gyazo.com/download/abc123.mp4"

    def test_probe_url_is_mp4_download_path(self) -> None:
        image = Image("abc123", "https://gyazo.com/abc123", "gif", "2024-01-01T00:00:00Z")
        assert image.probe_url == "https://i.gyazo.com/download/abc123.mp4"


# ------------------------------------------------------------------
# Metadata
# ------------------------------------------------------------------


class TestMetadata:
    """Tests for metadata emptiness and serialization."""

    def test_all_absent_is_empty(self) -> None:
        assert Metadata(app=None, title=None, url=None, desc="").is_empty

    def test_empty_strings_are_empty(self) -> None:
        assert Metadata(app="", title="", url="", desc="").is_empty

    def test_description_makes_non_empty(self) -> None:
        assert not Metadata(desc="x").is_empty

    def test_app_makes_non_empty(self) -> None:
        assert not Metadata(app="Firefox").is_empty

    def test_to_dict_omits_empty_fields(self) -> None:
        meta = Metadata(app="Firefox", title="", url=None, desc="note")
        assert meta.to_dict() == {"app": "Firefox", "desc": "note"}

    def test_from_dict_null_desc(self) -> None:
        meta = Metadata.from_dict({"app": None, "title": "Page", "url": None, "desc": None})
        assert meta.title == "Page"
        assert meta.desc == ""

    def test_from_dict_rejects_non_string(self) -> None:
        with pytest.raises(TypeError):
            Metadata.from_dict({"title": 42, "desc": ""})


# ------------------------------------------------------------------
# Image.from_dict / Image.to_file
# ------------------------------------------------------------------


class TestImage:
    """Tests for Image parsing and normalization."""

    def test_from_dict(self) -> None:
        data = {
            "image_id": "8980c52421e452ac3355ca3e5cfe7a0c",
            "permalink_url": "https://gyazo.com/8980c52421e452ac3355ca3e5cfe7a0c",
            "thumb_url": "https://thumb.gyazo.com/thumb/200/xyz.png",
            "type": "png",
            "created_at": "2014-05-21T14:23:10+0900",
            "metadata": {
                "app": None,
                "title": None,
                "url": None,
                "desc": "",
            },
            "ocr": {"locale": "en", "description": "Gyazo"},
        }
        image = Image.from_dict(data)

        assert image.image_id == "8980c52421e452ac3355ca3e5cfe7a0c"
        assert image.file_type == "png"
        assert image.created_at == "2014-05-21T14:23:10+0900"
        assert image.thumb_url == "https://thumb.gyazo.com/thumb/200/xyz.png"
        assert image.metadata == Metadata()
        assert image.ocr is not None
        assert image.ocr.description == "Gyazo"

    def test_from_dict_missing_required_field(self) -> None:
        with pytest.raises(KeyError):
            Image.from_dict({"image_id": "x", "type": "png"})

    def test_list_from_rejects_object(self) -> None:
        with pytest.raises(TypeError):
            Image.list_from({"image_id": "x"})  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        ("key", "value"),
        [("type", None), ("image_id", None), ("image_id", 123)],
    )
    def test_from_dict_rejects_wrong_types(self, key: str, value: object) -> None:
        data = {
            "image_id": "abc",
            "permalink_url": "https://gyazo.com/abc",
            "type": "png",
            "created_at": "t",
        }
        data[key] = value

        with pytest.raises(TypeError, match=key):
            Image.from_dict(data)

    def test_to_file(self) -> None:
        image = Image(
            image_id="abc",
            permalink_url="https://gyazo.com/abc",
            file_type="jpg",
            created_at="2024-01-01T00:00:00Z",
            thumb_url="https://thumb.gyazo.com/abc.jpg",
            metadata=Metadata(title="Screenshot"),
        )
        file = image.to_file()

        assert file == File(
            id="abc",
            file_type="jpg",
            created_at="2024-01-01T00:00:00Z",
            download="https://i.gyazo.com/abc.jpg",
            permalink="https://gyazo.com/abc",
            meta=Metadata(title="Screenshot"),
        )

    def test_to_file_drops_empty_metadata(self) -> None:
        image = Image("abc", "https://gyazo.com/abc", "png", "t", metadata=Metadata())
        assert image.to_file().meta is None

    def test_to_file_is_deterministic(self) -> None:
        image = Image("abc", "https://gyazo.com/abc", "mp4", "t", metadata=Metadata(desc="d"))
        assert image.to_file() == image.to_file()


# ------------------------------------------------------------------
# File
# ------------------------------------------------------------------


class TestFile:
    """Tests for the normalized File shape."""

    def test_name(self) -> None:
        file = File("abc", "mp4", "t", "https://i.gyazo.com/download/abc.mp4", "p")
        assert file.name == "abc.mp4"

    def test_to_dict_without_meta(self) -> None:
        file = File("abc", "png", "t", "https://i.gyazo.com/abc.png", "https://gyazo.com/abc")
        assert file.to_dict() == {
            "id": "abc",
            "type": "png",
            "created_at": "t",
            "download": "https://i.gyazo.com/abc.png",
            "permalink": "https://gyazo.com/abc",
        }

    def test_to_dict_with_meta(self) -> None:
        file = File("abc", "png", "t", "d", "p", meta=Metadata(app="Chrome"))
        assert file.to_dict()["meta"] == {"app": "Chrome"}


# ------------------------------------------------------------------
# User
# ------------------------------------------------------------------


class TestUser:
    def test_from_envelope(self) -> None:
        data = {
            "user": {
                "email": "someone@example.com",
                "is_pro": False,
                "is_team": True,
                "name": "someone",
                "profile_image": "//assets2.gyazo.com/assets/images/common/default_user_icon.svg",
                "uid": "0123456789abcdef01234567",
            }
        }
        user = User.from_envelope(data)

        assert user.email == "someone@example.com"
        assert user.is_pro is False
        assert user.is_team is True
        assert user.uid == "0123456789abcdef01234567"
        assert user.to_dict()["name"] == "someone"

    def test_unwrapped_user_fails(self) -> None:
        with pytest.raises(KeyError):
            User.from_envelope({"email": "someone@example.com"})

    @pytest.mark.parametrize("is_pro", ["false", 0, None])
    def test_flags_must_be_booleans(self, is_pro: object) -> None:
        data = {
            "user": {
                "email": "someone@example.com",
                "is_pro": is_pro,
                "is_team": False,
                "name": "someone",
                "profile_image": "//assets.gyazo.com/icon.svg",
                "uid": "uid",
            }
        }
        with pytest.raises(TypeError, match="is_pro"):
            User.from_envelope(data)


# ------------------------------------------------------------------
# Upload
# ------------------------------------------------------------------


class TestUpload:
    """Tests for upload defaults and overrides."""

    def test_defaults(self) -> None:
        upload = Upload()
        assert upload.app == DEFAULT_APP
        assert upload.public_metadata is False
        assert upload.anonymous is False

    def test_from_config(self) -> None:
        config = Config(upload_app="my-app", upload_public_metadata=True)
        upload = Upload.from_config(config)

        assert upload.app == "my-app"
        assert upload.public_metadata is True

    def test_from_config_without_app(self) -> None:
        assert Upload.from_config(Config()).app == DEFAULT_APP

    def test_overrides(self) -> None:
        base = Upload(public_metadata=True)
        upload = base.with_overrides(app="other", public_metadata=False, anonymous=True)

        assert upload == Upload(app="other", public_metadata=False, anonymous=True)
        assert base.public_metadata is True

    def test_none_overrides_keep_values(self) -> None:
        base = Upload(app="x", public_metadata=True)
        assert base.with_overrides() == base
