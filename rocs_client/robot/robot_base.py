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

from __future__ import annotations

import asyncio
from collections.abc import Callable
from types import TracebackType
from typing import Any

from reactivex.abc import DisposableBase

from rocs_client.common.camera import Camera
from rocs_client.core.global_config import GlobalConfig
from rocs_client.transport.core import RobotTransport
from rocs_client.transport.types import (
    ConnectionState,
    ConnectOption,
    ControlRequest,
    OutboundEnvelope,
)
from rocs_client.utils.logging_config import setup_logger
from rocs_client.utils.params import cover_param

logger = setup_logger()


class RobotBase:
    """Base class for every robot variant.

    Opens the streaming connection to the robot on construction, so it has to
    be created inside a running event loop:

        async with Human(ConnectOption(host="192.168.10.101")) as human:
            human.on_connected(lambda: print("connected"))
            await human.start()
    """

    def __init__(
        self,
        option: ConnectOption | None = None,
        *,
        config: GlobalConfig | None = None,
        transport: RobotTransport | None = None,
    ) -> None:
        """Initialize the robot and start connecting.

        Args:
            option: Robot address. Defaults to the ROCS_* environment settings.
            config: Timeouts and retry settings. Defaults to the environment.
            transport: Pre-built transport, mostly useful in tests.
        """
        logger.info("The robot is initializing...")
        self._transport = transport or RobotTransport(option, config)
        self.camera = Camera(self._transport)
        self._transport.start()

    @property
    def option(self) -> ConnectOption:
        return self._transport.option

    @property
    def config(self) -> GlobalConfig:
        return self._transport.config

    @property
    def state(self) -> ConnectionState:
        return self._transport.state

    async def start(self) -> Any:
        """Reset, zero and calibrate the robot into its initial state.

        Needed before taking control of the robot. Make sure it has clearance.
        """
        return await self._http_request("POST", "/robot/start")

    async def stop(self) -> Any:
        """Power the robot down safely. Takes precedence over other commands."""
        return await self._http_request("POST", "/robot/stop")

    def on_connected(self, listener: Callable[[], None]) -> DisposableBase:
        """Call `listener` once the streaming connection is established."""
        return self._transport.on_connected(listener)

    def on_close(self, listener: Callable[[], None]) -> DisposableBase:
        return self._transport.on_close(listener)

    def on_error(self, listener: Callable[[BaseException], None]) -> DisposableBase:
        return self._transport.on_error(listener)

    def on_message(self, listener: Callable[[str | bytes], None]) -> DisposableBase:
        """Call `listener` with every raw message the robot broadcasts."""
        return self._transport.on_message(listener)

    def _websocket_send(self, command: str, data: dict[str, Any]) -> asyncio.Task[None] | None:
        return self._transport.send_streaming_command(OutboundEnvelope(command, data))

    async def _http_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> Any:
        return await self._transport.send_control_request(
            ControlRequest(method=method, path=url, params=params, body=data)
        )

    @staticmethod
    def _cover_param(value: Any, name: str, min_threshold: float, max_threshold: float) -> float:
        return cover_param(value, name, min_threshold, max_threshold)

    async def close(self) -> None:
        """Stop pending retries and close both channels."""
        await self._transport.close()

    async def __aenter__(self) -> RobotBase:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.close()
