#!/usr/bin/env python3
"""
简单的授权码模式客户端示例。

从环境变量（或 .env 文件）读取 OAUTH2_* 配置，在浏览器中打开授权页面，
通过本地回调服务器接收授权码，然后换取访问令牌，并可选地立即刷新一次。
"""

import argparse
import logging
import secrets
import threading
import time
import webbrowser
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import parse_qs, urlparse

from oauth2_client import (
    AuthorizationCodeClient,
    ClientIdentity,
    OAuth2ClientError,
    TokenPayload,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("simple-auth-client")


class CallbackHandler(BaseHTTPRequestHandler):
    """接收授权服务器重定向回来的请求。"""

    def __init__(self, request, client_address, server, callback_data):
        self.callback_data = callback_data  # 与 CallbackServer 共享的 code/state/error
        super().__init__(request, client_address, server)

    def do_GET(self):
        query_params = parse_qs(urlparse(self.path).query)

        if "code" in query_params:
            self.callback_data["authorization_code"] = query_params["code"][0]
            self.callback_data["state"] = query_params.get("state", [None])[0]
            self._respond(200, "<h1>Authorization Successful!</h1><p>You can close this window.</p>")
        elif "error" in query_params:
            self.callback_data["error"] = query_params["error"][0]
            self._respond(400, f"<h1>授权失败</h1><p>错误信息: {query_params['error'][0]}</p>")
        else:
            self.send_response(404)
            self.end_headers()

    def _respond(self, status: int, body: str) -> None:
        self.send_response(status)
        self.send_header("Content-type", "text/html; charset=utf-8")
        self.end_headers()
        self.wfile.write(f"<html><body>{body}</body></html>".encode())

    def log_message(self, format, *args):
        """不把访问日志打印到终端。"""
        pass


class CallbackServer:
    """在后台线程中运行的本地回调服务器。"""

    def __init__(self, port: int = 3030):
        self.port = port
        self.server: HTTPServer | None = None
        self.thread: threading.Thread | None = None
        self.callback_data = {"authorization_code": None, "state": None, "error": None}

    def start(self) -> None:
        callback_data = self.callback_data

        class DataCallbackHandler(CallbackHandler):
            def __init__(self, request, client_address, server):
                super().__init__(request, client_address, server, callback_data)

        self.server = HTTPServer(("localhost", self.port), DataCallbackHandler)
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.thread.start()
        logger.info("Callback server listening on http://localhost:%s", self.port)

    def stop(self) -> None:
        if self.server:
            self.server.shutdown()
            self.server.server_close()
        if self.thread:
            self.thread.join(timeout=1)

    def wait_for_callback(self, timeout: float = 300) -> tuple[str, str | None]:
        """等待回调，返回 (授权码, state)；超时或授权失败时抛出 RuntimeError。"""
        deadline = time.time() + timeout
        while time.time() < deadline:
            if self.callback_data["authorization_code"]:
                return self.callback_data["authorization_code"], self.callback_data["state"]
            if self.callback_data["error"]:
                raise RuntimeError(f"OAuth 错误: {self.callback_data['error']}")
            time.sleep(0.1)  # 每 100ms 检查一次
        raise RuntimeError("等待 OAuth 回调超时")


def print_tokens(tokens: TokenPayload) -> None:
    """回调：只打印令牌的元信息，不输出令牌本身。"""
    logger.info(
        "Received tokens: token_type=%s expires_in=%s refresh_token=%s",
        tokens.get("token_type"),
        tokens.get("expires_in"),
        "yes" if "refresh_token" in tokens else "no",
    )


def run(refresh: bool, timeout: float) -> None:
    identity = ClientIdentity.from_env()
    expected_state = identity.state
    if expected_state is None:
        # 未配置 state 时随机生成一个，防止 CSRF
        expected_state = secrets.token_urlsafe(32)
        identity = identity.model_copy(update={"state": expected_state})

    client = AuthorizationCodeClient(identity)
    client.add_callback(print_tokens)

    port = urlparse(identity.redirect_uri).port or 80
    callback_server = CallbackServer(port=port)
    callback_server.start()
    try:
        authorization_uri = client.generate_authentication_uri()
        logger.info("Opening browser for authorization: %s", authorization_uri)
        webbrowser.open(authorization_uri)
        code, returned_state = callback_server.wait_for_callback(timeout=timeout)
    finally:
        callback_server.stop()

    if returned_state is None or not secrets.compare_digest(returned_state, expected_state):
        raise RuntimeError(f"状态参数不一致: {returned_state} != {expected_state}")

    tokens = client.fetch_access_token(code)

    if refresh:
        refresh_token = tokens.get("refresh_token")
        if not refresh_token:
            logger.warning("Authorization server did not issue a refresh token")
            return
        client.refresh_access_token(refresh_token)


def cli():
    parser = argparse.ArgumentParser(description="OAuth2 授权码模式示例客户端")
    parser.add_argument("--refresh", action="store_true", help="获取令牌后立即用 refresh token 刷新一次")
    parser.add_argument("--timeout", type=float, default=300, help="等待浏览器回调的秒数")
    args = parser.parse_args()

    try:
        run(refresh=args.refresh, timeout=args.timeout)
    except OAuth2ClientError as e:
        logger.error("OAuth2 flow failed: %s", e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    cli()
