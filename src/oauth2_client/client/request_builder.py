"""
Builds the two request shapes of the authorization code grant.

- the authorization redirect URI (GET, query parameters, no network call)
- the token exchange request (POST, form-encoded body) for both the
  authorization_code and the refresh_token grants

构造授权码模式中的两种请求：授权跳转 URI 与 token 交换请求。
"""

import httpx

from oauth2_client.client.parameters import (
    AUTHORIZATION_FIELDS,
    REFRESH_TOKEN_FIELDS,
    TOKEN_FIELDS,
    ParameterSet,
    bind_accessor,
    bind_accessors,
    resolve_parameters,
    select_accessors,
)
from oauth2_client.shared.identity import ClientIdentityProvider

# 定义 MIME 类型与请求头常量
FORM_URLENCODED = "application/x-www-form-urlencoded"
CONTENT_TYPE = "Content-Type"
ACCEPT = "Accept"

# grant_type 取值
AUTHORIZATION_CODE_GRANT = "authorization_code"
REFRESH_TOKEN_GRANT = "refresh_token"


def append_query(uri: str, params: ParameterSet) -> str:
    """把已编码的参数拼接到 URI 的查询串上。

    URI 本身已带查询串时使用 ``&`` 续接；参数名与值都按原样拼接，不再二次编码。
    """
    query = "&".join(f"{name}={value}" for name, values in params.items() for value in values)
    if not query:
        return uri

    if "?" not in uri:
        separator = "?"
    elif uri.endswith(("?", "&")):
        separator = ""
    else:
        separator = "&"
    return f"{uri}{separator}{query}"


class RequestBuilder:
    """根据身份提供者构造授权 URI 和 token 请求。

    访问器在构造时一次性绑定，之后不再变化；每次构造请求时重新调用访问器取值。
    """

    def __init__(self, identity: ClientIdentityProvider):
        accessors = bind_accessors(identity)
        self._authorization_accessors = select_accessors(accessors, AUTHORIZATION_FIELDS)
        self._token_accessors = select_accessors(accessors, TOKEN_FIELDS)
        self._refresh_token_accessors = select_accessors(accessors, REFRESH_TOKEN_FIELDS)
        self._authorization_endpoint = bind_accessor(identity, "get_authorization_endpoint")
        self._token_endpoint = bind_accessor(identity, "get_token_endpoint")

    def authorization_uri(self) -> str:
        """构造授权跳转 URI，参数值采用 RFC 3986 编码。"""
        params = resolve_parameters(self._authorization_accessors, encode=True)
        return append_query(str(self._authorization_endpoint()), params)

    def token_request(self, code: str) -> httpx.Request:
        """构建使用授权码换取访问令牌的请求。"""
        params = resolve_parameters(self._token_accessors)
        return self._build_token_request({"grant_type": [AUTHORIZATION_CODE_GRANT], "code": [code], **params})

    def refresh_token_request(self, refresh_token: str) -> httpx.Request:
        """构建使用 refresh token 刷新访问令牌的请求。"""
        params = resolve_parameters(self._refresh_token_accessors)
        return self._build_token_request(
            {"grant_type": [REFRESH_TOKEN_GRANT], "refresh_token": [refresh_token], **params}
        )

    def _build_token_request(self, data: ParameterSet) -> httpx.Request:
        # 表单编码交给 httpx 完成
        return httpx.Request(
            "POST",
            str(self._token_endpoint()),
            data=data,
            headers={CONTENT_TYPE: FORM_URLENCODED, ACCEPT: FORM_URLENCODED},
        )
