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

"""Persistent streaming channel used for time-sensitive motion commands."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from reactivex.observable import Observable
from reactivex.subject import BehaviorSubject, Subject
import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, WebSocketException

from rocs_client.constants import STREAM_MAX_RETRIES, STREAM_RETRY_DELAY
from rocs_client.transport.errors import StreamingSendExhausted, TransportFailure
from rocs_client.transport.types import ConnectionState, OutboundEnvelope
from rocs_client.utils.logging_config import setup_logger

logger = setup_logger()

# Seconds close() waits for queued commands to be written.
FLUSH_TIMEOUT = 1.0


@dataclass(frozen=True)
class RetryPolicy:
    """How long a streaming send waits for the channel to open.

    Attributes:
        delay: Seconds between attempts.
        max_retries: Consecutive failed attempts tolerated before a send is abandoned.
    """

    delay: float = STREAM_RETRY_DELAY
    max_retries: int = STREAM_MAX_RETRIES

    def __post_init__(self) -> None:
        if self.delay < 0:
            raise ValueError("delay must not be negative")
        if self.max_retries < 0:
            raise ValueError("max_retries must not be negative")


class StreamingChannel:
    """One WebSocket connection to the robot, with lifecycle published as streams.

    Sends are fire-and-forget. While the connection is open they are queued
    and written in call order. While it is not, each send retries on its own
    timer, so ordering across a channel-down period is not preserved.

    The retry counter belongs to the channel, not to a single send: a
    successful send resets it and every failed attempt of any pending send
    increments it.
    """

    def __init__(self, ws_url: str, retry_policy: RetryPolicy | None = None) -> None:
        self.ws_url = ws_url
        self.retry_policy = retry_policy or RetryPolicy()

        self._ws: Any = None
        self._retry_count = 0
        self._outbox: asyncio.Queue[str] = asyncio.Queue()
        self._run_task: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[None]] = set()
        self._closed = False

        self._state: BehaviorSubject[ConnectionState] = BehaviorSubject(ConnectionState.CONNECTING)
        self._open_subject: Subject[None] = Subject()
        self._close_subject: Subject[None] = Subject()
        self._error_subject: Subject[BaseException] = Subject()
        self._message_subject: Subject[str | bytes] = Subject()

    @property
    def state(self) -> ConnectionState:
        return self._state.value

    @property
    def retry_count(self) -> int:
        return self._retry_count

    def state_stream(self) -> Observable[ConnectionState]:
        return self._state

    def open_stream(self) -> Observable[None]:
        return self._open_subject

    def close_stream(self) -> Observable[None]:
        return self._close_subject

    def error_stream(self) -> Observable[BaseException]:
        return self._error_subject

    def message_stream(self) -> Observable[str | bytes]:
        return self._message_subject

    def start(self) -> None:
        """Schedule the connect/read loop on the running event loop."""
        if self._run_task is not None:
            return
        self._run_task = asyncio.get_running_loop().create_task(
            self._run(), name=f"stream:{self.ws_url}"
        )
        self._run_task.add_done_callback(self._on_run_done)

    async def _run(self) -> None:
        self._set_state(ConnectionState.CONNECTING)
        try:
            ws = await websockets.connect(self.ws_url)
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            logger.error("Robot initialization failed.", url=self.ws_url, error=str(e))
            self._fail(e)
            return

        self._ws = ws
        logger.info("Robot initialization successful.", url=self.ws_url)
        self._set_state(ConnectionState.OPEN)

        writer = asyncio.get_running_loop().create_task(self._drain(ws))
        try:
            async for message in ws:
                self._publish(self._message_subject, message)
        except ConnectionClosedError as e:
            logger.warning("Streaming channel closed abnormally", url=self.ws_url, error=str(e))
            self._fail(e)
        finally:
            writer.cancel()
            self._ws = None
            self._discard_outbox()

        self._set_state(ConnectionState.CLOSED)

    def _on_run_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Streaming channel loop failed",
                url=self.ws_url,
                exc_info=(type(exc), exc, exc.__traceback__),
            )
            self._fail(exc)

    async def _drain(self, ws: Any) -> None:
        while True:
            payload = await self._outbox.get()
            try:
                await ws.send(payload)
            except ConnectionClosed:
                logger.warning("Streaming channel closed while sending, command dropped")
                return
            finally:
                self._outbox.task_done()

    def _discard_outbox(self) -> None:
        dropped = 0
        while not self._outbox.empty():
            self._outbox.get_nowait()
            self._outbox.task_done()
            dropped += 1
        if dropped:
            logger.warning("Discarded unsent streaming commands", count=dropped)

    def send(self, envelope: OutboundEnvelope) -> asyncio.Task[None] | None:
        """Send a command, retrying while the channel is not open.

        Returns:
            None when the command was queued for transmission right away,
            otherwise the task that keeps retrying it. Awaiting the task is
            optional; it raises StreamingSendExhausted if the send is abandoned.

        Raises:
            StreamingSendExhausted: The retry budget was already used up.
            TransportFailure: The channel has been closed.
        """
        if self._closed:
            raise TransportFailure(f"Cannot send '{envelope.command}': streaming channel is closed")
        if self._transmit(envelope):
            return None

        self._record_failed_attempt(envelope)
        task = asyncio.get_running_loop().create_task(
            self._retry(envelope), name=f"stream-retry:{envelope.command}"
        )
        self._pending.add(task)
        task.add_done_callback(self._on_retry_done)
        return task

    def _transmit(self, envelope: OutboundEnvelope) -> bool:
        if self.state is not ConnectionState.OPEN or self._ws is None:
            return False
        self._outbox.put_nowait(envelope.to_wire())
        self._retry_count = 0
        return True

    def _record_failed_attempt(self, envelope: OutboundEnvelope) -> None:
        if self._retry_count >= self.retry_policy.max_retries:
            raise StreamingSendExhausted(
                f"Failed to send '{envelope.command}': maximum retry limit "
                f"({self.retry_policy.max_retries}) reached."
            )
        self._retry_count += 1
        logger.warning(
            "Streaming channel not ready, retrying",
            command=envelope.command,
            attempt=self._retry_count,
        )

    async def _retry(self, envelope: OutboundEnvelope) -> None:
        while True:
            await asyncio.sleep(self.retry_policy.delay)
            if self._transmit(envelope):
                return
            self._record_failed_attempt(envelope)

    def _on_retry_done(self, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Streaming send abandoned", error=str(exc))
            self.report_error(exc)

    def _fail(self, error: BaseException) -> None:
        self._set_state(ConnectionState.ERRORED)
        self._publish(self._error_subject, error)

    def report_error(self, error: BaseException) -> None:
        """Publish an error to subscribers without changing the connection state."""
        self._publish(self._error_subject, error)

    def _set_state(self, state: ConnectionState) -> None:
        if self._state.value is state:
            return
        self._publish(self._state, state)
        if state is ConnectionState.OPEN:
            self._publish(self._open_subject, None)
        elif state is ConnectionState.CLOSED:
            self._publish(self._close_subject, None)

    @staticmethod
    def _publish(subject: Subject[Any], value: Any) -> None:
        try:
            subject.on_next(value)
        except Exception:
            logger.exception("Streaming channel listener raised")

    async def flush(self) -> None:
        """Wait until every queued command has been written or discarded."""
        await self._outbox.join()

    async def close(self) -> None:
        """Cancel pending retries and close the connection."""
        self._closed = True
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        run_task = self._run_task
        ws = self._ws
        if ws is not None:
            try:
                await asyncio.wait_for(self.flush(), FLUSH_TIMEOUT)
            except asyncio.TimeoutError:
                logger.warning("Closing with unsent streaming commands", pending=self._outbox.qsize())
            await ws.close()
        elif run_task is not None and not run_task.done():
            run_task.cancel()

        if run_task is not None:
            # A failed loop has already been reported by _on_run_done.
            await asyncio.gather(run_task, return_exceptions=True)

        self._set_state(ConnectionState.CLOSED)
        for subject in (
            self._state,
            self._open_subject,
            self._close_subject,
            self._error_subject,
            self._message_subject,
        ):
            subject.on_completed()
