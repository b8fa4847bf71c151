"""
Ordered registry of token callbacks.

Callbacks are opaque handles compared by identity: ``remove`` drops the first
entry that *is* the given object, so duplicates are allowed and equal-but-distinct
callables are never confused. Note that ``obj.method`` creates a new bound method
object on every access; keep a reference to the one you registered if you intend
to remove it later.

The registry is not synchronised. Callers sharing one client across threads must
serialise add/remove/notify_all themselves.

token 回调的有序注册表。回调按引用比较，注册表本身不做线程同步。
"""

import logging
from collections.abc import Callable, Iterator

from oauth2_client.shared.exceptions import CallbackError

logger = logging.getLogger(__name__)

# token 载荷：扁平的字符串键值映射
TokenPayload = dict[str, str]
# 回调：接收 token 载荷，无返回值
TokenCallback = Callable[[TokenPayload], None]


class CallbackRegistry:
    """按注册顺序保存并通知回调。"""

    def __init__(self) -> None:
        self._callbacks: list[TokenCallback] = []

    def add(self, callback: TokenCallback) -> None:
        """追加回调，允许重复注册。"""
        self._callbacks.append(callback)
        logger.debug("Registered token callback %r", callback)

    def remove(self, callback: TokenCallback) -> None:
        """移除第一个与 callback 为同一对象的条目；不存在时什么也不做。"""
        for index, registered in enumerate(self._callbacks):
            if registered is callback:
                del self._callbacks[index]
                logger.debug("Removed token callback %r", callback)
                return

    def clear(self) -> None:
        self._callbacks.clear()

    def __len__(self) -> int:
        return len(self._callbacks)

    def __iter__(self) -> Iterator[TokenCallback]:
        return iter(list(self._callbacks))

    def notify_all(self, payload: TokenPayload) -> None:
        """按注册顺序同步调用所有回调，每个回调收到同一个载荷对象。

        某个回调抛出异常时，其余回调仍会执行；全部执行完后以 CallbackError 抛出收集到的异常。
        """
        errors: list[Exception] = []
        # 遍历快照，回调在执行中增删注册不会影响本轮通知
        for callback in list(self._callbacks):
            try:
                callback(payload)
            except Exception as e:
                logger.warning("Token callback %r failed: %s", callback, e)
                errors.append(e)

        if errors:
            raise CallbackError(f"{len(errors)} token callback(s) failed", errors) from errors[0]
