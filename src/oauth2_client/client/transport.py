"""
Synchronous transports for the token exchange.

The exchange engine only needs one capability: send a prepared request and block
until the response is available. Two implementations are provided:

- HttpxTransport: a blocking ``httpx.Client``
- AsyncHttpxTransport: an ``httpx.AsyncClient`` driven to completion with
  ``anyio.run``, for applications that standardise on the async client

token 交换使用的同步传输层。引擎只依赖"发送请求并阻塞等待响应"这一能力。
"""

import logging
from typing import Any, Protocol

import anyio
import httpx

logger = logging.getLogger(__name__)

# 默认超时时间（秒）
DEFAULT_TIMEOUT = 30.0


class TokenTransport(Protocol):
    """同步 HTTP 传输的协议（接口）类。"""

    def send(self, request: httpx.Request) -> httpx.Response:
        """发送请求并返回已读取响应体的响应。网络错误以 httpx.HTTPError 抛出。"""
        ...


class HttpClientFactory(Protocol):
    def __call__(
        self,
        headers: dict[str, str] | None = None,
        timeout: httpx.Timeout | None = None,
    ) -> httpx.Client: ...


class AsyncHttpClientFactory(Protocol):
    def __call__(
        self,
        headers: dict[str, str] | None = None,
        timeout: httpx.Timeout | None = None,
    ) -> httpx.AsyncClient: ...


def _client_kwargs(headers: dict[str, str] | None, timeout: httpx.Timeout | None) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "follow_redirects": True,
        "timeout": timeout if timeout is not None else httpx.Timeout(DEFAULT_TIMEOUT),
    }
    if headers is not None:
        kwargs["headers"] = headers
    return kwargs


def create_http_client(
    headers: dict[str, str] | None = None,
    timeout: httpx.Timeout | None = None,
) -> httpx.Client:
    """创建统一默认配置的同步 httpx 客户端（跟随重定向，默认 30 秒超时）。"""
    return httpx.Client(**_client_kwargs(headers, timeout))


def create_async_http_client(
    headers: dict[str, str] | None = None,
    timeout: httpx.Timeout | None = None,
) -> httpx.AsyncClient:
    """创建统一默认配置的异步 httpx 客户端。"""
    return httpx.AsyncClient(**_client_kwargs(headers, timeout))


class HttpxTransport:
    """基于 httpx.Client 的阻塞传输。

    传入 client 时由调用方负责其生命周期；否则每次发送都用工厂创建并关闭一个客户端。
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        client_factory: HttpClientFactory = create_http_client,
        timeout: httpx.Timeout | None = None,
    ) -> None:
        self.client = client
        self.client_factory = client_factory
        self.timeout = timeout

    def send(self, request: httpx.Request) -> httpx.Response:
        logger.debug("Sending %s %s", request.method, request.url)
        if self.client is not None:
            response = self.client.send(request)
        else:
            with self.client_factory(timeout=self.timeout) as client:
                response = client.send(request)
        logger.debug("Received HTTP %s from %s", response.status_code, request.url)
        return response


class AsyncHttpxTransport:
    """基于 httpx.AsyncClient 的传输，对外仍是同步调用。

    每次 send 都通过 anyio.run 启动一个事件循环执行请求，因此不能在已经运行事件循环的线程中调用；
    异步应用应使用 anyio.to_thread.run_sync 把交换调用放到工作线程里。
    """

    def __init__(
        self,
        client_factory: AsyncHttpClientFactory = create_async_http_client,
        timeout: httpx.Timeout | None = None,
        backend: str = "asyncio",
    ) -> None:
        self.client_factory = client_factory
        self.timeout = timeout
        self.backend = backend

    async def _send(self, request: httpx.Request) -> httpx.Response:
        async with self.client_factory(timeout=self.timeout) as client:
            response = await client.send(request)
            await response.aread()  # 在客户端关闭前读完响应体
            return response

    def send(self, request: httpx.Request) -> httpx.Response:
        logger.debug("Sending %s %s (async client)", request.method, request.url)
        response = anyio.run(self._send, request, backend=self.backend)
        logger.debug("Received HTTP %s from %s", response.status_code, request.url)
        return response
