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
from collections.abc import Iterable
from typing import Any

from rocs_client.core.global_config import GlobalConfig
from rocs_client.motor.dispatcher import JointCommandDispatcher, ReadinessPolicy
from rocs_client.motor.limits import LimitCache
from rocs_client.robot.robot_base import RobotBase
from rocs_client.transport.core import RobotTransport
from rocs_client.transport.types import ConnectOption


class Motor(RobotBase):
    """Joint-level control with robot-reported limits.

    The limit table is fetched once, in the background, when the object is
    created. It is not fetched again, even after a failed fetch or a
    reconnect; joint commands issued before it arrives wait for it.
    """

    def __init__(
        self,
        option: ConnectOption | None = None,
        *,
        config: GlobalConfig | None = None,
        transport: RobotTransport | None = None,
    ) -> None:
        super().__init__(option, config=config, transport=transport)
        self.motor_limits = LimitCache()
        self._dispatcher = JointCommandDispatcher(
            self.motor_limits,
            self._transport,
            ReadinessPolicy(
                interval=self.config.limit_poll_interval,
                max_polls=self.config.limit_max_polls,
            ),
        )
        self.limits_loaded = self._transport.spawn(
            self.motor_limits.load(self.get_motor_limit_list), name="motor-limits"
        )

    async def get_motor_limit_list(self) -> Any:
        """Fetch the raw limit table: ``{"data": [{no, orientation, min_angle, max_angle, ip}, ...]}``."""
        return await self._http_request("GET", "/robot/motor/limit/list")

    def move_joint(self, args: Iterable[Any]) -> asyncio.Task[None] | None:
        """Move several joints at once, clamped to their limits.

        Args:
            args: Targets with `no` (joint number), `orientation` and `angle`.
                Joints without a known limit are left out of the command.

        Returns:
            A task while the command is waiting for the limit table or for the
            connection, otherwise None.
        """
        return self._dispatcher.dispatch(args)
