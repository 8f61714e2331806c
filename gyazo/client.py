"""Gyazo API client."""

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import requests
from rich.console import Console

from . import __version__
from .config import Config, Credentials
from .exceptions import FilesystemError, ProtocolError, TransportError
from .models import CgiUpload, File, Image, Upload, User
from .transport import extract_json, extract_url, send, total_count, verify

console = Console(stderr=True)

API_URL = "https://api.gyazo.com/api"
API_IMAGE_UPLOAD_URL = "https://upload.gyazo.com/api/upload"
CGI_IMAGE_UPLOAD_URL = "https://upload.gyazo.com/upload.cgi"
VIDEO_UPLOAD_URL = "https://gif.gyazo.com/gif/upload"

PAGE_SIZE = 100

USER_AGENT = f"gyazo-python/{__version__}"

DEFAULT_HEADERS = {
    "Accept": "*/*",
    "User-Agent": USER_AGENT,
}


def _raw_page(data: Any) -> list[Any]:
    if not isinstance(data, list):
        raise TypeError(f"expected a JSON array, got {type(data).__name__}")
    return data


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def _created_at(path: Path) -> float | None:
    """File creation time as epoch seconds, where the platform records it.

    Uses ``st_birthtime``, which macOS, the BSDs and Windows expose. Linux
    does not, so uploads from Linux go without ``created_at``.
    """
    try:
        return getattr(path.stat(), "st_birthtime", None)
    except OSError:
        return None


class GyazoClient:
    """Client for the Gyazo API and its upload endpoints.

    Holds the resolved credentials and one HTTP session. Nothing else is
    stored between calls, and nothing is retried: rate limits (429) and
    server errors are raised as ApiError for the caller to handle.
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        timeout: float | None = None,
        quiet: bool = False,
    ) -> None:
        self.credentials = credentials or Credentials()
        self.timeout = timeout
        self.quiet = quiet
        self._session = self._create_session()

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> "GyazoClient":
        """Create a client using the credentials stored in config."""
        return cls(Credentials.resolve(config), **kwargs)

    def _create_session(self) -> requests.Session:
        """Create configured requests session."""
        session = requests.Session()
        session.headers.update(DEFAULT_HEADERS)
        return session

    def expect_cookie(self) -> str:
        return self.credentials.expect_cookie()

    def expect_device(self) -> str:
        return self.credentials.expect_device()

    def expect_key(self) -> str:
        return self.credentials.expect_key()

    def _request(self, method: str, url: str, message: str, **kwargs: Any) -> requests.Response:
        """Send a request with the client's timeout."""
        return send(self._session, method, url, message, timeout=self.timeout, **kwargs)

    def _api_get(self, url: str, params: dict[str, Any] | None = None) -> requests.Response:
        """GET from the official API, authenticated by access token."""
        query = {"access_token": self.expect_key()}
        query.update(params or {})
        response = self._request("GET", url, "Could not send API get request", params=query)
        return verify(response, f"API get request to `{url}` failed")

    def _internal_api_get(self, url: str, params: dict[str, Any]) -> requests.Response:
        """GET from the internal API, authenticated by session cookie."""
        headers = {"cookie": f"Gyazo_session={self.expect_cookie()}"}
        response = self._request(
            "GET",
            url,
            "Could not send internal API get request",
            params=params,
            headers=headers,
        )
        return verify(response, f"Internal API get request to `{url}` failed")

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def fix_mp4(self, image: Image) -> Image:
        """Reclassify a "gif" image as "mp4" if an MP4 file exists for it.

        The listing API reports some videos as gif. A HEAD request does not
        tell whether the MP4 exists, so this issues a GET and only looks at
        the status; the body is never read.
        """
        if image.file_type != "gif":
            return image

        try:
            response = self._session.request(
                "GET", image.probe_url, stream=True, timeout=self.timeout
            )
        except requests.RequestException as e:
            if not self.quiet:
                console.print(f"[yellow]Could not probe {image.image_id} for MP4: {e}[/yellow]")
            return image

        try:
            if 200 <= response.status_code < 300:
                image.file_type = "mp4"
                if not self.quiet:
                    console.print(f"[dim]{image.image_id} is an MP4 video[/dim]")
        finally:
            response.close()
        return image

    def to_file(self, image: Image) -> File:
        """Normalize an Image, after correcting its file type."""
        return self.fix_mp4(image).to_file()

    # ------------------------------------------------------------------
    # Official API
    # ------------------------------------------------------------------

    def get(self, image_id: str) -> File:
        """Fetch a single file by its ID."""
        url = f"{API_URL}/images/{image_id}"
        response = self._api_get(url)
        image = extract_json(
            response,
            "Could not decode API get request response as JSON",
            Image.from_dict,
            "Image",
        )
        return self.to_file(image)

    def count(self) -> int:
        """Get the number of files stored in the account."""
        response = self._api_get(f"{API_URL}/images", {"per_page": 0})
        count = total_count(response)
        if count is None:
            raise ProtocolError(
                "API did not respond to an empty read query with a parseable "
                "`X-Total-Count` header"
            )
        return count

    def me(self) -> User:
        """Get the account that owns the access token."""
        response = self._api_get(f"{API_URL}/users/me")
        return extract_json(
            response,
            "Could not decode API get request response as JSON",
            User.from_envelope,
            "user wrapped in object",
        )

    def list(self) -> Iterator[File]:
        """Iterate over all stored files, newest first.

        Pages are fetched one at a time, only when the consumer asks for
        the next file, so stopping early issues no further requests.

        Yields:
            File objects in the order the API returns them

        Raises:
            ProtocolError: A page lacks a parseable ``x-total-count`` header.
        """
        url = f"{API_URL}/images"
        page_number = 1
        received = 0

        while True:
            response = self._api_get(url, {"page": page_number, "per_page": PAGE_SIZE})
            total = total_count(response)
            if total is None:
                raise ProtocolError(
                    f"API did not respond to page {page_number} with a parseable "
                    "`X-Total-Count` header"
                )

            page = extract_json(
                response,
                "Could not decode API get request response as JSON",
                Image.list_from,
                "vector of Image",
            )
            received += len(page)

            for image in page:
                yield self.to_file(image)

            if received >= total:
                return
            if not page:
                raise ProtocolError(
                    f"API returned an empty page {page_number} after {received} "
                    f"of {total} files"
                )
            page_number += 1

    # ------------------------------------------------------------------
    # Internal API
    # ------------------------------------------------------------------

    def list_internal(self) -> Iterator[Any]:
        """Iterate over raw file objects from the internal API.

        The internal API sends no total count, so iteration ends at the
        first empty page. Values are passed through as decoded JSON.
        """
        url = f"{API_URL}/internal/images"
        page_number = 1

        while True:
            response = self._internal_api_get(url, {"page": page_number, "per_page": PAGE_SIZE})
            page = extract_json(
                response,
                "Could not decode internal API get request response as JSON",
                _raw_page,
                "vector of values",
            )
            if not page:
                return

            yield from page
            page_number += 1

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    def upload_image(self, path: Path, upload: Upload) -> str:
        """Upload an image and return its URL."""
        return self.upload_image_cgi(path, upload).url

    def upload_image_cgi(self, path: Path, upload: Upload) -> CgiUpload:
        """Upload an image the way the desktop app does.

        Allowed types are jpg, png and gif (mp4 only for paid plans). Without
        a device ID the server assigns one, which is returned so the caller
        can keep it for later uploads.

        Args:
            path: Image file to upload
            upload: Attribution and visibility of the upload

        Returns:
            Upload URL (with a session token, if the server sent one) and
            the device ID the upload belongs to.
        """
        device = None if upload.anonymous else self.credentials.device
        data = {
            "id": device or "",
            "metadata": json.dumps({"app": upload.app}),
        }

        try:
            f = path.open("rb")
        except OSError as e:
            raise FilesystemError("Could not prepare image upload form") from e

        with f:
            response = self._request(
                "POST",
                CGI_IMAGE_UPLOAD_URL,
                "Could not send CGI image upload request",
                data=data,
                files={"imagedata": (path.name, f)},
                headers={"x-gyazo-accept-token": "required"},
            )
        verify(response, "CGI image upload request failed")

        token = response.headers.get("x-gyazo-session-token")
        if not device:
            device = response.headers.get("x-gyazo-id")
            if not device:
                raise ProtocolError(
                    "CGI image upload response did not assign a device ID (`X-Gyazo-Id`)"
                )

        url = extract_url(
            response,
            "CGI image upload response did not contain a URL",
            "CGI image upload response did not contain text",
        )
        if token:
            url = urlunsplit(urlsplit(url)._replace(query=f"token={token}"))

        return CgiUpload(url=url, device=device)

    def upload_image_api(self, path: Path, upload: Upload) -> File:
        """Upload an image through the official API (requires an API key).

        Allowed types are jpg, png and gif (mp4 only for paid plans).
        """
        params: dict[str, Any] = {
            "access_token": self.expect_key(),
            "app": upload.app,
            "metadata_is_public": _bool_param(upload.public_metadata),
        }
        created_at = _created_at(path)
        if created_at is not None:
            # Shown as "Uploaded at"
            params["created_at"] = created_at

        try:
            f = path.open("rb")
        except OSError as e:
            raise FilesystemError("Could not prepare image upload form") from e

        with f:
            response = self._request(
                "POST",
                API_IMAGE_UPLOAD_URL,
                "Could not send API image upload request",
                params=params,
                files={"imagedata": (path.name, f)},
            )
        verify(response, "API image upload failed")

        image = extract_json(
            response,
            "Could not decode image API upload response as JSON",
            Image.from_dict,
            "Image",
        )
        return self.to_file(image)

    def upload_video(self, path: Path) -> str:
        """Upload an MP4 video and return its URL (requires a device ID)."""
        data = {"id": self.expect_device()}

        try:
            f = path.open("rb")
        except OSError as e:
            raise FilesystemError("Could not prepare video upload form") from e

        with f:
            response = self._request(
                "POST",
                VIDEO_UPLOAD_URL,
                "Could not send video upload request",
                data=data,
                files={"data": (path.name, f)},
            )
        verify(response, "Video upload failed")

        return extract_url(
            response,
            "Video API upload response did not contain a URL",
            "Video API upload response did not contain text",
        )

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    def download(self, file: File, filepath: Path, force: bool = False) -> int:
        """Download a file's content directly to disk.

        Uses streaming to avoid loading large videos into memory. A partially
        written file is removed if the download fails.

        Args:
            file: File to download
            filepath: Destination path
            force: Overwrite the destination if it exists

        Returns:
            Number of bytes written
        """
        response = self._request(
            "GET",
            file.download,
            "Failed to connect to file download URL",
            stream=True,
        )
        try:
            verify(response, f"Download of {file.id} failed")

            try:
                f = filepath.open("wb" if force else "xb")
            except OSError as e:
                raise FilesystemError(f"Failed to create file {filepath}") from e

            size = 0
            try:
                with f:
                    for chunk in response.iter_content(chunk_size=8192):
                        f.write(chunk)
                        size += len(chunk)
            except BaseException as e:
                # Clean up partial file
                filepath.unlink(missing_ok=True)
                if isinstance(e, requests.RequestException):
                    raise TransportError("Failed to read bytes from file download URL") from e
                if isinstance(e, OSError):
                    raise FilesystemError("Failed to copy bytes to destination") from e
                raise
        finally:
            response.close()

        return size

    def close(self) -> None:
        """Close the session."""
        self._session.close()

    def __enter__(self) -> "GyazoClient":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
