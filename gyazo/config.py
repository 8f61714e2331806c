"""Configuration and credential management for gyazo."""

import json
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rich.console import Console

from .exceptions import MissingCredentialError

console = Console(stderr=True)

CONFIG_DIR = Path.home() / ".config"
CONFIG_FILE = CONFIG_DIR / "gyazo.toml"


@dataclass
class Config:
    """Application configuration."""

    cookie: str | None = None
    device: str | None = None
    key: str | None = None
    upload_app: str | None = None
    upload_public_metadata: bool = False

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load configuration from file."""
        path = path or CONFIG_FILE
        if not path.exists():
            return cls()

        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            console.print(f"[yellow]Warning: Ignoring invalid config {path}: {e}[/yellow]")
            return cls()
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        config = cls()

        if "cookie" in data:
            config.cookie = str(data["cookie"])

        if "device" in data:
            config.device = str(data["device"])

        if "key" in data:
            config.key = str(data["key"])

        upload = data.get("upload", {})

        if "app" in upload:
            config.upload_app = str(upload["app"])

        if "public_metadata" in upload:
            config.upload_public_metadata = bool(upload["public_metadata"])

        return config

    def to_toml(self) -> str:
        """Render the effective configuration, masking credentials."""
        lines = []
        for name in ("cookie", "device", "key"):
            value = getattr(self, name)
            if value is not None:
                lines.append(f"{name} = {json.dumps(_mask(value))}")

        lines.append("")
        lines.append("[upload]")
        if self.upload_app is not None:
            lines.append(f"app = {json.dumps(self.upload_app)}")
        lines.append(f"public_metadata = {str(self.upload_public_metadata).lower()}")
        return "\n".join(lines) + "\n"

    @staticmethod
    def get_config_path() -> Path:
        """Get path to config file."""
        return CONFIG_FILE

    @staticmethod
    def create_default_config() -> None:
        """Create default config file with comments."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)

        default_config = """\
# gyazo configuration file
# Location: ~/.config/gyazo.toml

# Value of the Gyazo_session cookie, for the internal listing API
# cookie = "..."

# Device ID ("Gyazo ID"), used by image and video uploads
# device = "..."

# API key ("access token") from https://gyazo.com/oauth/applications
# key = "..."

[upload]
# Application the uploads are attributed to
# app = "https://github.com/brooke-eva/gyazo"

# Make upload metadata (app, title, ...) visible to everyone
public_metadata = false
"""
        CONFIG_FILE.write_text(default_config)


def _mask(value: str) -> str:
    if len(value) <= 8:
        return "*" * len(value)
    return value[:4] + "*" * (len(value) - 4)


@dataclass(frozen=True)
class Credentials:
    """The credentials available to a client.

    Any of them may be absent; an operation that needs one asks for it
    through the ``expect_*`` accessors and fails only then.
    """

    cookie: str | None = None  # Gyazo_session cookie (internal API)
    device: str | None = None  # Device ID (CGI and video uploads)
    key: str | None = None  # Access token (official API)

    @classmethod
    def resolve(
        cls,
        config: Config,
        cookie: str | None = None,
        device: str | None = None,
        key: str | None = None,
        no_cookie: bool = False,
        no_device: bool = False,
        no_key: bool = False,
    ) -> "Credentials":
        """Merge explicit values over the configuration.

        Resolution order: ``no_*`` flag > explicit value > config value.
        """
        return cls(
            cookie=None if no_cookie else (cookie or config.cookie),
            device=None if no_device else (device or config.device),
            key=None if no_key else (key or config.key),
        )

    def expect_cookie(self) -> str:
        if not self.cookie:
            raise MissingCredentialError("cookie", "No cookie configured")
        return self.cookie

    def expect_device(self) -> str:
        if not self.device:
            raise MissingCredentialError("device", "No device ID configured")
        return self.device

    def expect_key(self) -> str:
        if not self.key:
            raise MissingCredentialError("key", "No API key configured")
        return self.key
