"""
Request parameter resolution.

Binds OAuth2 parameter names to accessors on a ClientIdentityProvider once, at
client construction, and resolves them into a fresh parameter set per request.

请求参数解析：在构造客户端时把参数名绑定到身份提供者的访问器上，
每次请求时再调用访问器生成新的参数集合。
"""

from collections.abc import Callable, Mapping

from oauth2_client.shared.encoding import encode_uri_value
from oauth2_client.shared.exceptions import OAuth2ConfigurationError
from oauth2_client.shared.identity import DEFAULT_RESPONSE_TYPE, ClientIdentityProvider

# 访问器：无参可调用对象，返回参数值或 None（None 表示省略该参数）
Accessor = Callable[[], str | None]
# 参数集合：参数名 -> 值列表（与表单编码的多值语义一致）
ParameterSet = dict[str, list[str]]

# 各类请求读取的字段，顺序即生成的参数顺序
AUTHORIZATION_FIELDS = ("response_type", "client_id", "redirect_uri", "scope", "state")
TOKEN_FIELDS = ("redirect_uri", "client_id", "client_secret")
REFRESH_TOKEN_FIELDS = ("client_id", "client_secret")

_REQUIRED = object()


def bind_accessor(provider: ClientIdentityProvider, method_name: str, default: object = _REQUIRED) -> Accessor:
    """取出身份提供者上的访问器；可选能力缺失时返回一个给出默认值的闭包。"""
    accessor = getattr(provider, method_name, None)
    if accessor is None:
        if default is _REQUIRED:
            raise OAuth2ConfigurationError(
                f"{type(provider).__name__} does not provide required capability {method_name}()"
            )
        return lambda: default  # type: ignore[return-value]
    if not callable(accessor):
        raise OAuth2ConfigurationError(f"{type(provider).__name__}.{method_name} is not callable")
    return accessor


def bind_accessors(provider: ClientIdentityProvider) -> dict[str, Accessor]:
    """把每个 OAuth2 参数名绑定到对应的访问器上。

    必需能力（client_id、redirect_uri）缺失时抛出 OAuth2ConfigurationError。
    """
    return {
        "response_type": bind_accessor(provider, "get_response_type", DEFAULT_RESPONSE_TYPE),
        "client_id": bind_accessor(provider, "get_client_id"),
        "client_secret": bind_accessor(provider, "get_client_secret", None),
        "redirect_uri": bind_accessor(provider, "get_redirect_uri"),
        "scope": bind_accessor(provider, "get_scope", None),
        "state": bind_accessor(provider, "get_state", None),
    }


def select_accessors(accessors: Mapping[str, Accessor], fields: tuple[str, ...]) -> dict[str, Accessor]:
    """按字段表挑出一组访问器，保持字段表的顺序。"""
    return {name: accessors[name] for name in fields}


def resolve_parameters(accessors: Mapping[str, Accessor], encode: bool = False) -> ParameterSet:
    """调用访问器生成参数集合。

    参数：
        accessors: 参数名 -> 访问器。
        encode: 为 True 时按授权 URI 的 RFC 3986 规则编码每个值；
            为 False 时原样返回，由传输层做表单编码。

    返回：
        新的参数集合。访问器返回 None 的参数不会出现在结果中。
    """
    params: ParameterSet = {}
    for name, accessor in accessors.items():
        # 访问器自身抛出的异常属于嵌入方的实现缺陷，不做包装
        value = accessor()
        if value is None:
            continue
        params[name] = [encode_uri_value(value) if encode else value]  # type: ignore[list-item]
    return params
