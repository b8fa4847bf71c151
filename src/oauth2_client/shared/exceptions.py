"""
Exception hierarchy for the authorization code client.

授权码客户端的异常层级。
所有异常都继承自 OAuth2ClientError，底层原因通过 ``raise ... from`` 挂在 __cause__ 上。
"""


# 所有 OAuth2 客户端错误的基类
class OAuth2ClientError(Exception):
    """OAuth2 客户端错误的基类异常。"""


# 构造客户端时身份提供者缺少必需能力，或环境变量配置不完整
class OAuth2ConfigurationError(OAuth2ClientError):
    """客户端配置无效时引发的异常。"""


# 请求没有拿到任何响应（连接失败、超时等）
class TokenRequestError(OAuth2ClientError):
    """向 token 端点发送请求失败时引发的异常。"""


# token 端点返回了错误状态码
class TokenResponseError(OAuth2ClientError):
    """token 端点返回 4xx/5xx 状态码时引发的异常。"""

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
        error: str | None = None,
        error_description: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        # RFC 6749 §5.2 错误响应中的字段（如果响应体是合法的错误对象）
        self.error = error
        self.error_description = error_description


# 成功响应的响应体不是扁平 JSON 对象
class TokenParseError(OAuth2ClientError):
    """token 响应无法解析时引发的异常。"""


# 通知回调时至少一个回调抛出了异常
class CallbackError(OAuth2ClientError):
    """一个或多个回调执行失败时引发的异常。"""

    def __init__(self, message: str, errors: list[Exception]):
        super().__init__(message)
        self.errors = errors
