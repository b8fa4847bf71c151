"""
Client identity: the read-only capability set the authorization code flow draws
its parameters from.

客户端身份：授权码流程读取请求参数的只读能力集合。
"""

import logging
import os
from typing import Protocol

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from oauth2_client.shared.exceptions import OAuth2ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_RESPONSE_TYPE = "code"
DEFAULT_ENV_PREFIX = "OAUTH2_"


# 身份提供者协议：由嵌入方实现，核心只读取不修改
class ClientIdentityProvider(Protocol):
    """客户端身份与端点配置的协议（接口）类。

    ``get_response_type``、``get_client_secret``、``get_scope`` 和 ``get_state``
    是可选能力：实现方可以不提供，客户端会分别回退为 ``"code"`` 和缺省。
    可选字段返回 ``None`` 表示该参数不出现在请求中。
    """

    def get_response_type(self) -> str:
        """response_type，通常为 ``"code"``。"""
        ...

    def get_client_id(self) -> str:
        """client_id。"""
        ...

    def get_client_secret(self) -> str | None:
        """client_secret；公共客户端返回 None。"""
        ...

    def get_redirect_uri(self) -> str:
        """redirect_uri，授权请求和 token 请求都会用到。"""
        ...

    def get_scope(self) -> str | None:
        """scope；不需要时返回 None。"""
        ...

    def get_state(self) -> str | None:
        """state；不需要时返回 None。"""
        ...

    def get_authorization_endpoint(self) -> str:
        """授权端点 URI。"""
        ...

    def get_token_endpoint(self) -> str:
        """token 端点 URI。"""
        ...


class ClientIdentity(BaseModel):
    """基于静态配置值的身份提供者实现。"""

    model_config = ConfigDict(frozen=True)

    client_id: str
    redirect_uri: str
    authorization_endpoint: str
    token_endpoint: str
    client_secret: str | None = None
    scope: str | None = None
    state: str | None = None
    response_type: str = DEFAULT_RESPONSE_TYPE

    def get_response_type(self) -> str:
        return self.response_type

    def get_client_id(self) -> str:
        return self.client_id

    def get_client_secret(self) -> str | None:
        return self.client_secret

    def get_redirect_uri(self) -> str:
        return self.redirect_uri

    def get_scope(self) -> str | None:
        return self.scope

    def get_state(self) -> str | None:
        return self.state

    def get_authorization_endpoint(self) -> str:
        return self.authorization_endpoint

    def get_token_endpoint(self) -> str:
        return self.token_endpoint

    @classmethod
    def from_env(cls, prefix: str = DEFAULT_ENV_PREFIX, load_dotenv_file: bool = True) -> "ClientIdentity":
        """从环境变量（以及 .env 文件）构造身份配置。

        参数：
            prefix: 环境变量前缀，例如 ``OAUTH2_`` 对应 ``OAUTH2_CLIENT_ID``。
            load_dotenv_file: 是否先调用 load_dotenv 加载 .env 文件。

        返回：
            ClientIdentity 实例。

        引发异常：
            OAuth2ConfigurationError: 缺少必需的环境变量。
        """
        if load_dotenv_file:
            load_dotenv()  # 已存在的环境变量不会被 .env 覆盖

        values: dict[str, str] = {}
        for name in cls.model_fields:
            value = os.getenv(f"{prefix}{name.upper()}")
            # 空字符串视为未设置
            if value:
                values[name] = value

        missing = [
            f"{prefix}{name.upper()}"
            for name, info in cls.model_fields.items()
            if info.is_required() and name not in values
        ]
        if missing:
            logger.debug("Missing OAuth2 client settings: %s", ", ".join(missing))
            raise OAuth2ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

        return cls(**values)
