"""
OAuth2 authorization code client.

Builds authorization URIs, exchanges authorization codes and refresh tokens at
the token endpoint, and hands the resulting token payload to registered
callbacks. Every call is synchronous and one-shot: no retries, no token cache,
no refresh scheduling.

OAuth2 授权码客户端实现。
负责生成授权 URI、在 token 端点用授权码或 refresh token 换取令牌，并把结果通知给已注册的回调。
"""

import json
from typing import Any, Union

import httpx
from pydantic import StrictBool, StrictFloat, StrictInt, StrictStr, TypeAdapter, ValidationError

from oauth2_client.client.callbacks import CallbackRegistry, TokenCallback, TokenPayload
from oauth2_client.client.request_builder import RequestBuilder
from oauth2_client.client.transport import HttpxTransport, TokenTransport
from oauth2_client.shared.exceptions import TokenParseError, TokenRequestError, TokenResponseError
from oauth2_client.shared.identity import ClientIdentityProvider

# token 响应只接受值为标量的 JSON 对象
_TokenResponseAdapter = TypeAdapter(dict[str, Union[StrictBool, StrictInt, StrictFloat, StrictStr]])
_ErrorResponseAdapter = TypeAdapter(dict[str, Any])


def parse_token_response(content: bytes | str) -> TokenPayload:
    """把 token 端点的响应体解析为扁平的字符串映射。

    非字符串标量保留其 JSON 文本形式（``3600`` -> ``"3600"``，``true`` -> ``"true"``）。
    非对象、非法 JSON、嵌套对象/数组以及 null 值都会引发 TokenParseError。
    """
    try:
        raw = _TokenResponseAdapter.validate_json(content)
    except ValidationError as e:
        raise TokenParseError("response parse error") from e

    return {key: value if isinstance(value, str) else json.dumps(value) for key, value in raw.items()}


def _error_fields(response: httpx.Response) -> tuple[str | None, str | None]:
    """尽量从错误响应中提取 RFC 6749 §5.2 的 error / error_description。"""
    try:
        body = _ErrorResponseAdapter.validate_json(response.content)
    except ValidationError:
        return None, None

    error = body.get("error")
    description = body.get("error_description")
    return (
        error if isinstance(error, str) else None,
        description if isinstance(description, str) else None,
    )


class AuthorizationCodeClient:
    """
    OAuth2 授权码模式客户端。
    身份配置与访问器绑定在构造时确定；回调注册表默认为空，只能通过 add_callback/remove_callback 修改。
    """

    def __init__(
        self,
        identity: ClientIdentityProvider,  # 身份提供者，提供 client_id、端点等信息
        transport: TokenTransport | None = None,  # 同步 HTTP 传输，默认使用 httpx.Client
    ):
        """初始化客户端；身份提供者缺少必需能力时抛出 OAuth2ConfigurationError。"""
        self.identity = identity
        self.transport: TokenTransport = transport or HttpxTransport()
        self.request_builder = RequestBuilder(identity)
        self.callbacks = CallbackRegistry()

    def generate_authentication_uri(self) -> str:
        """生成授权跳转 URI，不发起网络请求。"""
        return self.request_builder.authorization_uri()

    def add_callback(self, callback: TokenCallback) -> None:
        """注册回调，在每次成功获取令牌后调用。"""
        self.callbacks.add(callback)

    def remove_callback(self, callback: TokenCallback) -> None:
        """按引用移除回调；未注册时忽略。"""
        self.callbacks.remove(callback)

    def fetch_access_token(self, code: str) -> TokenPayload:
        """使用授权码换取访问令牌。

        参数：
            code: 授权服务器回调中带回的授权码。

        返回：
            解析后的 token 载荷（同时已通知所有回调）。

        引发异常：
            TokenRequestError: 请求未能送达 token 端点。
            TokenResponseError: token 端点返回错误状态码。
            TokenParseError: 响应体不是扁平 JSON 对象。
            CallbackError: 有回调执行失败。
        """
        return self._exchange(self.request_builder.token_request(code))

    def refresh_access_token(self, refresh_token: str) -> TokenPayload:
        """使用 refresh token 换取新的访问令牌，异常与 fetch_access_token 相同。"""
        return self._exchange(self.request_builder.refresh_token_request(refresh_token))

    def _exchange(self, request: httpx.Request) -> TokenPayload:
        response = self._send(request)
        payload = self._handle_token_response(response)
        # 只有完整成功后才通知回调
        self.callbacks.notify_all(payload)
        return payload

    def _send(self, request: httpx.Request) -> httpx.Response:
        try:
            return self.transport.send(request)
        except httpx.HTTPError as e:
            raise TokenRequestError(f"request error: {e}") from e

    def _handle_token_response(self, response: httpx.Response) -> TokenPayload:
        """处理 token 端点的响应。"""
        if response.is_error:
            error, error_description = _error_fields(response)
            message = f"response error: {response.status_code}"
            if error:
                message = f"{message} {error}"
            raise TokenResponseError(
                message,
                status_code=response.status_code,
                body=response.text,
                error=error,
                error_description=error_description,
            )

        return parse_token_response(response.content)
