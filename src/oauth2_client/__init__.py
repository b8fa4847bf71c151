from .client.auth import AuthorizationCodeClient, parse_token_response
from .client.callbacks import CallbackRegistry, TokenCallback, TokenPayload
from .client.transport import AsyncHttpxTransport, HttpxTransport, TokenTransport
from .shared.exceptions import (
    CallbackError,
    OAuth2ClientError,
    OAuth2ConfigurationError,
    TokenParseError,
    TokenRequestError,
    TokenResponseError,
)
from .shared.identity import ClientIdentity, ClientIdentityProvider

__all__ = [
    "AsyncHttpxTransport",
    "AuthorizationCodeClient",
    "CallbackError",
    "CallbackRegistry",
    "ClientIdentity",
    "ClientIdentityProvider",
    "HttpxTransport",
    "OAuth2ClientError",
    "OAuth2ConfigurationError",
    "TokenCallback",
    "TokenParseError",
    "TokenPayload",
    "TokenRequestError",
    "TokenResponseError",
    "TokenTransport",
    "parse_token_response",
]
