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

"""Bounded parameter coercion shared by every ranged motion command."""

import math
from numbers import Real
from typing import Any

from rocs_client.utils.logging_config import setup_logger

logger = setup_logger()


def cover_param(value: Any, name: str, min_threshold: float, max_threshold: float) -> float:
    """Keep a command parameter inside ``[min_threshold, max_threshold]``.

    Missing or non-numeric values are replaced by 0 before clamping. Every
    adjustment is logged as a warning; this function never raises.

    Args:
        value: The requested parameter value.
        name: Parameter name used in the warning.
        min_threshold: Lowest allowed value.
        max_threshold: Highest allowed value.

    Returns:
        The value, moved to the nearest threshold when out of range.
    """
    if value is None or isinstance(value, bool) or not isinstance(value, Real) or math.isnan(value):
        logger.warning(
            f"Invalid parameter: {name} is {value}. The value 0 will be used",
            param=name,
        )
        value = 0
    if value > max_threshold:
        logger.warning(
            f"Invalid parameter: {name} ({value}) exceeds maximum allowed value ({max_threshold}). "
            f"The maximum value ({max_threshold}) will be used.",
            param=name,
        )
        value = max_threshold
    if value < min_threshold:
        logger.warning(
            f"Invalid parameter: {name} ({value}) is less than the minimum allowed value "
            f"({min_threshold}). The minimum value ({min_threshold}) will be used.",
            param=name,
        )
        value = min_threshold
    return value
