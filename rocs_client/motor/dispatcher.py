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

"""Joint command dispatch: hold, clamp against robot limits, forward.

No `move_joint` command leaves the client with an angle outside the range
the robot reported for that joint:

1. the batch is normalized to (no, orientation, angle) targets
2. while the limit table is empty the whole batch is re-tried later
3. each target is looked up by (no, orientation); unknown joints are dropped
4. angles are clamped into [min_angle, max_angle]; limit-only fields are not sent
5. the surviving targets go out as a single streaming command
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from rocs_client.constants import LIMIT_POLL_INTERVAL
from rocs_client.motor.limits import LimitCache
from rocs_client.transport.core import RobotTransport
from rocs_client.transport.errors import LimitsUnavailableError
from rocs_client.transport.types import OutboundEnvelope
from rocs_client.utils.logging_config import setup_logger
from rocs_client.utils.params import cover_param

logger = setup_logger()

MOVE_JOINT = "move_joint"


@dataclass(frozen=True)
class JointTarget:
    """Desired angle for one joint."""

    no: str
    orientation: str
    angle: float | None


# Name used by the robot SDK documentation.
MotorScheme = JointTarget


def _as_target(item: Any) -> JointTarget:
    if isinstance(item, JointTarget):
        return JointTarget(str(item.no), item.orientation, item.angle)
    try:
        if isinstance(item, Mapping):
            return JointTarget(str(item["no"]), item["orientation"], item.get("angle"))
        return JointTarget(str(item.no), item.orientation, getattr(item, "angle", None))
    except (KeyError, AttributeError) as e:
        raise TypeError(f"joint target needs 'no' and 'orientation': {item!r}") from e


def normalize_targets(batch: Iterable[Any]) -> list[JointTarget]:
    """Reduce a batch to (no, orientation, angle) targets, dropping any other field.

    Accepts JointTarget instances, mappings and objects with matching attributes.
    """
    return [_as_target(item) for item in batch]


@dataclass(frozen=True)
class ReadinessPolicy:
    """How a dispatch waits for the limit table.

    Attributes:
        interval: Seconds between checks.
        max_polls: Checks before giving up with LimitsUnavailableError.
            None polls until the table arrives, however long that takes.
    """

    interval: float = LIMIT_POLL_INTERVAL
    max_polls: int | None = None


class JointCommandDispatcher:
    def __init__(
        self,
        limits: LimitCache,
        transport: RobotTransport,
        policy: ReadinessPolicy | None = None,
    ) -> None:
        self._limits = limits
        self._transport = transport
        self.policy = policy or ReadinessPolicy()

    def build_command(self, targets: Iterable[JointTarget]) -> OutboundEnvelope | None:
        """Join targets with their limits and clamp them.

        Returns:
            The `move_joint` envelope, or None when no target has a known limit.
        """
        commands = []
        for target in targets:
            limit = self._limits.find_limit(target.no, target.orientation)
            if limit is None:
                logger.debug(
                    "No limit for joint, dropping it", no=target.no, orientation=target.orientation
                )
                continue
            angle = cover_param(target.angle, "angle", limit.min_angle, limit.max_angle)
            commands.append({"no": target.no, "orientation": target.orientation, "angle": angle})

        if not commands:
            return None
        return OutboundEnvelope(MOVE_JOINT, {"command": commands})

    def dispatch(self, batch: Iterable[Any]) -> asyncio.Task[None] | None:
        """Clamp a batch of joint targets and send it as one `move_joint` command.

        Never blocks. If the limit table is not loaded yet the whole batch is
        deferred and re-checked every `policy.interval` seconds.

        Returns:
            A task while the batch is deferred or the streaming send is being
            retried, None once the batch has been handed off (or nothing matched).
            A deferred task also waits out the streaming retry of its send.
        """
        targets = normalize_targets(batch)
        if self._limits.loaded:
            return self._send(targets)

        logger.info("Joint limits not loaded yet, deferring move_joint", joints=len(targets))
        return self._transport.spawn(self._dispatch_when_ready(targets), name=MOVE_JOINT)

    def _send(self, targets: list[JointTarget]) -> asyncio.Task[None] | None:
        envelope = self.build_command(targets)
        if envelope is None:
            logger.debug("No joint in the batch matched a limit, nothing sent", joints=len(targets))
            return None
        return self._transport.send_streaming_command(envelope)

    async def _dispatch_when_ready(self, targets: list[JointTarget]) -> None:
        polls = 0
        while not self._limits.loaded:
            if self.policy.max_polls is not None and polls >= self.policy.max_polls:
                raise LimitsUnavailableError(
                    f"Joint limits still unavailable after {polls} checks, move_joint abandoned"
                )
            polls += 1
            await asyncio.sleep(self.policy.interval)

        retry = self._send(targets)
        if retry is not None:
            await retry
