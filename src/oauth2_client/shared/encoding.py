"""Percent-encoding helpers for authorization request URIs."""

from urllib.parse import quote_plus

# 表单编码会过度转义的 RFC 3986 字符，按顺序还原
_RFC3986_REPLACEMENTS = (
    ("+", "%20"),
    ("%21", "!"),
    ("%27", "'"),
    ("%28", "("),
    ("%29", ")"),
    ("%7E", "~"),
)


def form_encode(value: str) -> str:
    """application/x-www-form-urlencoded 编码（空格编码为 ``+``，``*`` 保持原样）。"""
    return quote_plus(value, safe="*")


def encode_uri_value(value: str | None) -> str | None:
    """将参数值编码为浏览器可直接使用的 RFC 3986 形式。

    先做标准的表单编码，再把 ``+`` 换成 ``%20``，
    并把 ``!'()~`` 从百分号转义还原成字面字符。
    ``None`` 原样返回，以便调用方继续按缺省参数处理。
    """
    if value is None:
        return None

    encoded = form_encode(value)
    for old, new in _RFC3986_REPLACEMENTS:
        encoded = encoded.replace(old, new)
    return encoded
