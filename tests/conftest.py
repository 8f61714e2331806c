"""Shared fixtures: a client whose HTTP session is a mock."""

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from gyazo.client import GyazoClient
from gyazo.config import Credentials


def make_response(
    status: int = 200,
    body: Any = None,
    text: str | None = None,
    headers: dict[str, str] | None = None,
) -> requests.Response:
    """Build a real requests.Response without touching the network."""
    if text is None:
        text = "" if body is None else json.dumps(body)

    response = requests.Response()
    response.status_code = status
    response._content = text.encode("utf-8")
    response._content_consumed = True
    response.encoding = "utf-8"
    response.headers = CaseInsensitiveDict(headers or {})
    return response


def image_json(image_id: str, file_type: str = "png", **extra: Any) -> dict[str, Any]:
    data = {
        "image_id": image_id,
        "permalink_url": f"https://gyazo.com/{image_id}",
        "thumb_url": f"https://thumb.gyazo.com/thumb/200/{image_id}.jpg",
        "type": file_type,
        "created_at": "2018-07-24T07:33:24.771Z",
    }
    data.update(extra)
    return data


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(cookie="session-cookie", device="device-id", key="api-key")


@pytest.fixture
def make_client(credentials: Credentials) -> Callable[..., tuple[GyazoClient, MagicMock]]:
    """Factory for a quiet client with a mocked session."""

    def factory(creds: Credentials | None = None) -> tuple[GyazoClient, MagicMock]:
        client = GyazoClient(creds or credentials, quiet=True)
        session = MagicMock(spec=requests.Session)
        client._session = session
        return client, session

    return factory
