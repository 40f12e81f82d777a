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
from enum import Enum
from typing import Any

from rocs_client.robot.robot_base import RobotBase


class CarMod(Enum):
    MOD_ACTION = "ACTION"
    MOD_HOME = "HOME"
    MOD_FIX = "FIX"

    MOD_4_WHEEL = "WHEEL_4"
    MOD_3_WHEEL = "WHEEL_3"
    MOD_2_WHEEL = "WHEEL_2"


class Car(RobotBase):
    """Wheeled robot with switchable wheel modes."""

    mod: CarMod | None = None

    async def set_mode(self, mod: CarMod) -> Any:
        """Switch wheel mode. The mode is remembered even if the request fails."""
        self.mod = mod
        return await self._http_request("POST", "/robot/mode", data={"mod_val": mod.value})

    def move(self, angle: float, speed: float) -> asyncio.Task[None] | None:
        """Drive with a steering angle in [-45, 45] and a speed in [-500, 500]."""
        angle = self._cover_param(angle, "angle", -45, 45)
        speed = self._cover_param(speed, "speed", -500, 500)
        return self._websocket_send("move", {"angle": angle, "speed": speed})
