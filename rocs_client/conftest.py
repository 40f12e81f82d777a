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

import asyncio
import json
import socket
from typing import Any

import httpx
import pytest
import pytest_asyncio
import websockets
from websockets.exceptions import ConnectionClosed

from rocs_client.core.global_config import GlobalConfig
from rocs_client.transport.core import RobotTransport
from rocs_client.transport.types import ConnectOption

LIMIT_LIST = [
    {"no": "1", "orientation": "left", "min_angle": -10, "max_angle": 10, "ip": "192.168.137.10"},
    {"no": "1", "orientation": "right", "min_angle": -20, "max_angle": 20, "ip": "192.168.137.11"},
    {"no": "2", "orientation": "left", "min_angle": 0, "max_angle": 90, "ip": "192.168.137.12"},
]


class FakeRobotApi:
    """In-process stand-in for the robot's HTTP API, served through httpx.MockTransport."""

    def __init__(self, routes: dict[tuple[str, str], Any] | None = None) -> None:
        self.routes: dict[tuple[str, str], Any] = {
            ("GET", "/robot/motor/limit/list"): {"code": 0, "data": LIMIT_LIST},
        }
        self.routes.update(routes or {})
        self.delays: dict[tuple[str, str], float] = {}
        self.requests: list[httpx.Request] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key in self.delays:
            await asyncio.sleep(self.delays[key])
        if key not in self.routes:
            return httpx.Response(404, json={"code": 404, "msg": "not found"})
        return httpx.Response(200, json=self.routes[key])

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


class RecordingServer:
    """Local WebSocket endpoint that records every JSON message it receives."""

    def __init__(self) -> None:
        self.received: list[dict[str, Any]] = []
        self.greeting: str | None = None
        self.port: int | None = None
        self._server: Any = None

    async def _handler(self, websocket, path=None) -> None:
        if self.greeting is not None:
            await websocket.send(self.greeting)
        try:
            async for message in websocket:
                self.received.append(json.loads(message))
        except ConnectionClosed:
            pass

    async def start(self) -> None:
        self._server = await websockets.serve(self._handler, "127.0.0.1", 0)
        self.port = self._server.sockets[0].getsockname()[1]

    async def stop(self) -> None:
        self._server.close()
        await self._server.wait_closed()

    async def wait_for_messages(self, count: int, timeout: float = 2.0) -> list[dict[str, Any]]:
        async def _poll() -> None:
            while len(self.received) < count:
                await asyncio.sleep(0.005)

        await asyncio.wait_for(_poll(), timeout)
        return self.received


@pytest.fixture
def fake_api() -> FakeRobotApi:
    return FakeRobotApi()


@pytest_asyncio.fixture
async def robot_server():
    server = RecordingServer()
    await server.start()
    yield server
    await server.stop()


@pytest.fixture
def unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def test_config() -> GlobalConfig:
    """Reference behaviour with the delays shortened so tests run fast."""
    return GlobalConfig(
        _env_file=None,
        stream_retry_delay=0.02,
        limit_poll_interval=0.01,
        request_timeout=1.0,
    )


@pytest_asyncio.fixture
async def robot_factory(fake_api, test_config, unused_port, monkeypatch):
    """Build robot facades whose streaming commands are recorded instead of sent.

    Returns ``(robot, sent)`` where ``sent`` collects every OutboundEnvelope.
    """
    robots = []

    def _make(robot_cls):
        transport = RobotTransport(
            ConnectOption(port=unused_port), test_config, http_transport=fake_api.transport()
        )
        sent = []
        monkeypatch.setattr(transport, "send_streaming_command", sent.append)
        robot = robot_cls(transport=transport)
        robots.append(robot)
        return robot, sent

    yield _make
    for robot in robots:
        await robot.close()
