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

from typing import Any

import httpx

from rocs_client.core.global_config import GlobalConfig
from rocs_client.robot.car import Car
from rocs_client.robot.human import Human
from rocs_client.robot.robot_base import RobotBase
from rocs_client.transport.control import ControlChannel
from rocs_client.transport.core import RobotTransport
from rocs_client.transport.types import ConnectOption, ControlRequest
from rocs_client.utils.logging_config import setup_logger

logger = setup_logger()

ROBOT_TYPES: dict[str, type[RobotBase]] = {
    "human": Human,
    "car": Car,
}


async def get_robot_type(
    option: ConnectOption | None = None,
    *,
    config: GlobalConfig | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Ask the robot what it is (``"human"``, ``"car"``, ...)."""
    config = config or GlobalConfig()
    option = option or config.connect_option()
    channel = ControlChannel(option.base_url, config.request_timeout, transport=http_transport)
    try:
        response = await channel.request(ControlRequest("GET", "/robot/type"))
    finally:
        await channel.aclose()
    return response["data"]


async def connect_robot(
    option: ConnectOption | None = None,
    *,
    config: GlobalConfig | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> RobotBase:
    """Build the facade matching the robot's reported type.

    Raises:
        ValueError: The robot reported a type this client does not know.
    """
    config = config or GlobalConfig()
    option = option or config.connect_option()
    robot_type = await get_robot_type(option, config=config, http_transport=http_transport)
    try:
        robot_cls = ROBOT_TYPES[robot_type]
    except (KeyError, TypeError) as e:
        raise ValueError(f"Unsupported robot type: {robot_type!r}") from e

    logger.info("Connecting to robot", type=robot_type, host=option.host, port=option.port)
    return robot_cls(transport=RobotTransport(option, config, http_transport=http_transport))
