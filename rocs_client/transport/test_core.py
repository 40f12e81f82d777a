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

import pytest

from rocs_client.transport.core import RobotTransport
from rocs_client.transport.errors import TransportFailure
from rocs_client.transport.types import ConnectionState, ConnectOption, ControlRequest, OutboundEnvelope


@pytest.mark.asyncio
async def test_both_channels_share_the_endpoint(test_config):
    transport = RobotTransport(ConnectOption(host="10.0.0.2", port=9000, ssl=True), test_config)

    assert transport.control.base_url == "https://10.0.0.2:9000"
    assert transport.stream.ws_url == "wss://10.0.0.2:9000/ws"
    assert transport.stream.retry_policy.delay == test_config.stream_retry_delay
    await transport.close()


@pytest.mark.asyncio
async def test_control_request_goes_through_control_channel(fake_api, test_config):
    fake_api.routes[("GET", "/robot/type")] = {"code": 0, "data": "human"}
    transport = RobotTransport(
        ConnectOption(host="robot"), test_config, http_transport=fake_api.transport()
    )

    response = await transport.send_control_request(ControlRequest("GET", "/robot/type"))

    assert response["data"] == "human"
    await transport.close()


@pytest.mark.asyncio
async def test_listeners_receive_connection_events(robot_server, test_config):
    transport = RobotTransport(ConnectOption(port=robot_server.port), test_config)
    opened = asyncio.Event()
    closed = []
    transport.on_connected(opened.set)
    transport.on_close(lambda: closed.append(True))

    transport.start()
    await asyncio.wait_for(opened.wait(), 2.0)
    assert transport.state is ConnectionState.OPEN

    assert transport.send_streaming_command(OutboundEnvelope("stand")) is None
    await robot_server.wait_for_messages(1)

    await transport.close()
    assert closed == [True]
    assert transport.state is ConnectionState.CLOSED


@pytest.mark.asyncio
async def test_spawned_failure_is_published_as_error(test_config):
    transport = RobotTransport(ConnectOption(host="robot"), test_config)
    errors = []
    transport.on_error(errors.append)

    async def broken():
        raise RuntimeError("boom")

    task = transport.spawn(broken(), name="broken")
    with pytest.raises(RuntimeError):
        await task
    await asyncio.sleep(0)

    assert [str(e) for e in errors] == ["boom"]
    await transport.close()


@pytest.mark.asyncio
async def test_close_cancels_background_work(test_config):
    transport = RobotTransport(ConnectOption(host="robot"), test_config)
    task = transport.spawn(asyncio.sleep(60), name="sleeper")

    await transport.close()

    assert task.cancelled()
    await transport.close()


@pytest.mark.asyncio
async def test_streaming_send_after_close_fails_fast(test_config):
    transport = RobotTransport(ConnectOption(host="robot"), test_config)
    await transport.close()

    with pytest.raises(TransportFailure):
        transport.send_streaming_command(OutboundEnvelope("move"))
