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

"""Per-joint angle ranges reported by the robot."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from rocs_client.transport.errors import TransportError
from rocs_client.utils.logging_config import setup_logger

logger = setup_logger()

LimitKey = tuple[str, str]


class JointLimit(BaseModel):
    """Allowed angle range of one joint, as reported by the robot.

    `ip` is the motor's bus address. It is kept for reference and never
    leaves the client.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    no: str
    orientation: str
    min_angle: float
    max_angle: float
    ip: str | None = None

    @property
    def key(self) -> LimitKey:
        return (self.no, self.orientation)


class LimitCache:
    """Joint limits keyed by (joint number, orientation).

    Empty means "not loaded yet", never "robot has no joints". Filled once,
    wholesale, by `load()`.
    """

    def __init__(self) -> None:
        self._limits: dict[LimitKey, JointLimit] = {}

    @property
    def loaded(self) -> bool:
        return bool(self._limits)

    def __len__(self) -> int:
        return len(self._limits)

    def __iter__(self) -> Iterator[JointLimit]:
        return iter(self._limits.values())

    def find_limit(self, no: str, orientation: str) -> JointLimit | None:
        return self._limits.get((str(no), orientation))

    def replace(self, records: Iterable[JointLimit | Mapping[str, Any]]) -> None:
        """Swap in a new limit table.

        A record with a missing field or a bad value is logged and skipped;
        the remaining joints are still usable.
        """
        limits: dict[LimitKey, JointLimit] = {}
        for record in records:
            try:
                limit = record if isinstance(record, JointLimit) else JointLimit.model_validate(record)
            except ValidationError as e:
                logger.warning(
                    "Skipping invalid joint limit", record=record, errors=e.error_count()
                )
                continue
            if limit.key in limits:
                logger.warning(
                    "Duplicate joint limit, keeping the later record",
                    no=limit.no,
                    orientation=limit.orientation,
                )
            limits[limit.key] = limit
        self._limits = limits

    async def load(self, fetch: Callable[[], Awaitable[Any]]) -> bool:
        """Populate the cache from ``fetch()``, best effort.

        ``fetch`` returns the decoded limit-list response, whose ``data`` field
        holds the records. Any failure is logged and leaves the cache as it was.

        Returns:
            True if the cache now holds at least one limit.
        """
        try:
            response = await fetch()
            records = response["data"]
            if not isinstance(records, list):
                raise TypeError(f"expected a list of limits, got {type(records).__name__}")
            self.replace(records)
        except TransportError as e:
            logger.error("Failed to fetch motor limits", error=str(e), status=e.status_code)
            return False
        except (KeyError, TypeError) as e:
            logger.error("Malformed motor limit list", error=str(e))
            return False

        logger.info("Motor limits loaded", count=len(self._limits))
        return self.loaded
