"""gyazo - Client library and CLI for the Gyazo image and video host.

Fetch, list, download and upload screenshots and screen recordings
through the official Gyazo API and its upload endpoints.
"""

__version__ = "0.1.0"

from .client import GyazoClient
from .config import Config, Credentials
from .exceptions import (
    ApiError,
    ApiStatus,
    DecodeError,
    FilesystemError,
    GyazoError,
    MissingCredentialError,
    ProtocolError,
    TransportError,
    UrlParseError,
)
from .models import CgiUpload, File, Image, Metadata, Ocr, Upload, User

__all__ = [
    # Version
    "__version__",
    # Main classes
    "GyazoClient",
    "Config",
    "Credentials",
    # Models
    "Image",
    "File",
    "Metadata",
    "Ocr",
    "User",
    "Upload",
    "CgiUpload",
    # Exceptions
    "GyazoError",
    "MissingCredentialError",
    "TransportError",
    "FilesystemError",
    "UrlParseError",
    "ApiError",
    "ApiStatus",
    "DecodeError",
    "ProtocolError",
]
