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
from dataclasses import asdict, dataclass
from typing import Any

from rocs_client.robot.robot_base import RobotBase


@dataclass
class EndEffectorScheme:
    """Target pose of a hand: position, orientation quaternion and angular velocity."""

    x: float = 0
    y: float = 0
    z: float = 0
    qx: float = 0
    qy: float = 0
    qz: float = 0
    qw: float = 0
    # Reserved by the robot, not used yet.
    vx: float = 0
    vy: float = 0
    vz: float = 0


class EndEffector(RobotBase):
    async def enable(self) -> Any:
        return await self._http_request("GET", "/robot/end_effector/enable")

    async def disable(self) -> Any:
        return await self._http_request("GET", "/robot/end_effector/disable")

    async def enable_state(self, frequency: int = 1) -> Any:
        """Broadcast end effector state `frequency` times per second via `on_message`."""
        return await self._http_request(
            "GET", "/robot/enable_terminal_state", params={"frequency": frequency}
        )

    async def disable_state(self) -> Any:
        # Same endpoint as enable_state, called without a frequency.
        return await self._http_request("GET", "/robot/enable_terminal_state")

    def control_left(self, param: EndEffectorScheme) -> asyncio.Task[None] | None:
        return self._websocket_send("left_hand_pr", {"param": asdict(param)})

    def control_right(self, param: EndEffectorScheme) -> asyncio.Task[None] | None:
        return self._websocket_send("right_hand_pr", {"param": asdict(param)})
