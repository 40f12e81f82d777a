# Copyright 2025 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Transport core: one control channel and one streaming channel per robot."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

import httpx
from reactivex.abc import DisposableBase

from rocs_client.core.global_config import GlobalConfig
from rocs_client.transport.control import ControlChannel
from rocs_client.transport.errors import StreamingSendExhausted
from rocs_client.transport.stream import RetryPolicy, StreamingChannel
from rocs_client.transport.types import (
    ConnectionState,
    ConnectOption,
    ControlRequest,
    OutboundEnvelope,
)
from rocs_client.utils.logging_config import setup_logger

logger = setup_logger()

T = TypeVar("T")


class RobotTransport:
    """Owns both channels to a single robot endpoint.

    Must be created while an event loop is running: `start()` schedules the
    streaming connect on it, and background work handed to `spawn()` runs
    there too.
    """

    def __init__(
        self,
        option: ConnectOption | None = None,
        config: GlobalConfig | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            option: Robot address. Defaults to the one in `config`.
            config: Timeouts and retry settings. Defaults to the environment.
            http_transport: Optional httpx transport for the control channel.
        """
        self.config = config or GlobalConfig()
        self.option = option or self.config.connect_option()

        self.control = ControlChannel(
            self.option.base_url,
            timeout=self.config.request_timeout,
            transport=http_transport,
        )
        self.stream = StreamingChannel(
            self.option.ws_url,
            RetryPolicy(
                delay=self.config.stream_retry_delay,
                max_retries=self.config.stream_max_retries,
            ),
        )
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def base_url(self) -> str:
        return self.option.base_url

    @property
    def state(self) -> ConnectionState:
        return self.stream.state

    def start(self) -> None:
        self.stream.start()

    async def send_control_request(self, request: ControlRequest) -> Any:
        """Issue a request/response call. Failures propagate as TransportError."""
        return await self.control.request(request)

    def send_streaming_command(self, envelope: OutboundEnvelope) -> asyncio.Task[None] | None:
        """Fire-and-forget send over the streaming channel.

        Returns the retry task when the channel was not open, else None.
        """
        task = self.stream.send(envelope)
        if task is not None:
            self._track(task)
        return task

    def spawn(self, coro: Coroutine[Any, Any, T], name: str | None = None) -> asyncio.Task[T]:
        """Run background work owned by this connection.

        A failure is logged and published on the error stream; it is still
        raised to anyone awaiting the returned task.
        """
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._track(task)
        task.add_done_callback(self._report_failure)
        return task

    def _track(self, task: asyncio.Task[Any]) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _report_failure(self, task: asyncio.Task[Any]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        # The streaming channel publishes its own exhaustion errors.
        if exc is not None and not isinstance(exc, StreamingSendExhausted):
            logger.error(
                "Background task failed",
                task=task.get_name(),
                exc_info=(type(exc), exc, exc.__traceback__),
            )
            self.stream.report_error(exc)

    def on_connected(self, listener: Callable[[], None]) -> DisposableBase:
        return self.stream.open_stream().subscribe(lambda _: listener())

    def on_close(self, listener: Callable[[], None]) -> DisposableBase:
        return self.stream.close_stream().subscribe(lambda _: listener())

    def on_error(self, listener: Callable[[BaseException], None]) -> DisposableBase:
        return self.stream.error_stream().subscribe(listener)

    def on_message(self, listener: Callable[[str | bytes], None]) -> DisposableBase:
        return self.stream.message_stream().subscribe(listener)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        await self.stream.close()
        await self.control.aclose()
