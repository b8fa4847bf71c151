import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from oauth2_client.client.auth import AuthorizationCodeClient
from oauth2_client.client.transport import HttpxTransport
from oauth2_client.shared.identity import ClientIdentity

TOKEN_ENDPOINT = "https://auth.example.com/token"


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replays queued responses."""

    def __init__(self, *responses: httpx.Response):
        self.requests: list[httpx.Request] = []
        self.responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        template = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        # httpx binds a response to the request it answers, so hand out a fresh copy each time
        return httpx.Response(template.status_code, content=template.content, headers=template.headers)


def json_response(status_code: int = 200, body: Any = None, text: str = "") -> httpx.Response:
    return httpx.Response(
        status_code=status_code,
        content=json.dumps(body).encode() if body is not None else text.encode(),
        headers={"content-type": "application/json"} if body is not None else {},
    )


def make_identity(**overrides) -> ClientIdentity:
    defaults: dict[str, Any] = dict(
        client_id="abc",
        redirect_uri="https://cb",
        authorization_endpoint="https://auth/ep",
        token_endpoint=TOKEN_ENDPOINT,
        state="xyz",
    )
    defaults.update(overrides)
    return ClientIdentity(**defaults)


@pytest.fixture
def identity() -> ClientIdentity:
    return make_identity()


@pytest.fixture
def make_client() -> Callable[..., tuple[AuthorizationCodeClient, RecordingHandler]]:
    def _make(*responses: httpx.Response, identity: ClientIdentity | None = None):
        handler = RecordingHandler(*responses)
        transport = HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))
        return AuthorizationCodeClient(identity or make_identity(), transport=transport), handler

    return _make
