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

import pytest

from rocs_client.common.camera import Camera
from rocs_client.transport.core import RobotTransport
from rocs_client.transport.types import ConnectOption


@pytest.fixture
def transport(fake_api, test_config):
    return RobotTransport(
        ConnectOption(host="robot", port=8001), test_config, http_transport=fake_api.transport()
    )


@pytest.mark.asyncio
async def test_available_stream_sets_url(transport, fake_api):
    fake_api.routes[("GET", "/control/camera_status")] = {"code": 0, "data": True}
    camera = Camera(transport)

    assert await camera.refresh() is True
    assert camera.video_stream_status is True
    assert camera.video_stream_url == "http://robot:8001/control/camera"
    await transport.close()


@pytest.mark.asyncio
async def test_unavailable_stream_clears_url(transport, fake_api):
    fake_api.routes[("GET", "/control/camera_status")] = {"code": 0, "data": False}
    camera = Camera(transport)

    assert await camera.refresh() is False
    assert camera.video_stream_url is None
    await transport.close()


@pytest.mark.asyncio
async def test_probe_failure_is_logged_not_raised(transport):
    camera = Camera(transport)

    assert await camera.refresh() is False
    assert camera.video_stream_status is False
    await transport.close()
