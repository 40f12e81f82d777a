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

"""GR humanoid robot: locomotion, head and upper body control, status monitoring."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any

from rocs_client.motor.motor import Motor

WALK_ANGLE_LIMIT = 45.0
WALK_SPEED_LIMIT = 0.8
HEAD_LIMIT = 17.1887
SQUAT_RANGE = (-0.15, 0.0)
WAIST_LIMIT = 14.32


class ArmAction(Enum):
    RESET = "RESET"
    LEFT_ARM_WAVE = "LEFT_ARM_WAVE"
    TWO_ARMS_WAVE = "TWO_ARMS_WAVE"
    ARMS_SWING = "ARMS_SWING"
    HELLO = "HELLO"


class HandAction(Enum):
    HALF_HANDSHAKE = "HALF_HANDSHAKE"
    THUMB_UP = "THUMB_UP"
    OPEN = "OPEN"
    SLIGHTLY_BENT = "SLIGHTLY_BENT"
    GRASP = "GRASP"
    TREMBLE = "TREMBLE"
    HANDSHAKE = "HANDSHAKE"


class BodyAction(Enum):
    SQUAT = "SQUAT"
    ROTATE_WAIST = "ROTATE_WAIST"


def _present(**fields: Any) -> dict[str, Any]:
    return {k: v.value if isinstance(v, Enum) else v for k, v in fields.items() if v is not None}


class Human(Motor):
    """The GR humanoid robot."""

    async def stand(self) -> Any:
        """Stand up in place. Call after `start()` has finished calibrating."""
        return await self._http_request("POST", "/robot/stand")

    async def get_joint_limit(self) -> Any:
        return await self._http_request("GET", "/robot/joint_limit")

    async def get_joint_states(self) -> Any:
        return await self._http_request("GET", "/robot/joint_states")

    async def enable_debug_state(self, frequence: int = 1) -> Any:
        """Ask the robot to broadcast its state `frequence` times per second.

        The states arrive through `on_message`.
        """
        return await self._http_request(
            "GET", "/robot/enable_states_listen", params={"frequence": frequence}
        )

    async def disable_debug_state(self) -> Any:
        return await self._http_request("GET", "/robot/disable_states_listen")

    def walk(self, angle: float, speed: float) -> asyncio.Task[None] | None:
        """Walk with a heading angle in [-45, 45] degrees and a speed in [-0.8, 0.8]."""
        angle = self._cover_param(angle, "angle", -WALK_ANGLE_LIMIT, WALK_ANGLE_LIMIT)
        speed = self._cover_param(speed, "speed", -WALK_SPEED_LIMIT, WALK_SPEED_LIMIT)
        return self._websocket_send("move", {"angle": angle, "speed": speed})

    def head(self, roll: float, pitch: float, yaw: float) -> asyncio.Task[None] | None:
        """Orient the head. Each angle is limited to +-17.1887 degrees."""
        roll = self._cover_param(roll, "roll", -HEAD_LIMIT, HEAD_LIMIT)
        pitch = self._cover_param(pitch, "pitch", -HEAD_LIMIT, HEAD_LIMIT)
        yaw = self._cover_param(yaw, "yaw", -HEAD_LIMIT, HEAD_LIMIT)
        return self._websocket_send("head", {"roll": roll, "pitch": pitch, "yaw": yaw})

    def body(self, squat: float, rotate_waist: float) -> asyncio.Task[None] | None:
        """Squat (metres, [-0.15, 0]) and rotate the waist ([-14.32, 14.32] degrees)."""
        squat = self._cover_param(squat, "squat", *SQUAT_RANGE)
        rotate_waist = self._cover_param(rotate_waist, "rotate_waist", -WAIST_LIMIT, WAIST_LIMIT)
        return self._websocket_send("lower_body", {"squat": squat, "rotate_waist": rotate_waist})

    async def upper_body(
        self, arm_action: ArmAction | None = None, hand_action: HandAction | None = None
    ) -> Any:
        """Play a preset arm and/or hand action."""
        return await self._http_request(
            "POST",
            "/robot/upper_body",
            data=_present(arm_action=arm_action, hand_action=hand_action),
        )

    async def lower_body(self, lower_body_mode: BodyAction | None = None) -> Any:
        return await self._http_request(
            "POST", "/robot/lower_body", data=_present(lower_body_mode=lower_body_mode)
        )

    async def control_svr_start(self) -> Any:
        """Start the robot-side SDK control service."""
        return await self._http_request("GET", "/robot/sdk_ctrl/start")

    async def control_svr_close(self) -> Any:
        return await self._http_request("GET", "/robot/sdk_ctrl/close")

    async def control_svr_status(self) -> Any:
        return await self._http_request("GET", "/robot/sdk_ctrl/status")

    async def control_svr_log_view(self) -> Any:
        return await self._http_request("GET", "/robot/sdk_ctrl/log")
