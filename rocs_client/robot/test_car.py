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

from rocs_client.robot.car import Car, CarMod
from rocs_client.transport.errors import TransportFailure


@pytest.mark.asyncio
async def test_move_clamps_angle_and_speed(robot_factory):
    car, sent = robot_factory(Car)

    car.move(-60, 900)

    assert sent[0].command == "move"
    assert sent[0].data == {"angle": -45, "speed": 500}


@pytest.mark.asyncio
async def test_set_mode_sends_mode_value(robot_factory, fake_api):
    fake_api.routes[("POST", "/robot/mode")] = {"code": 0}
    car, _ = robot_factory(Car)

    await car.set_mode(CarMod.MOD_4_WHEEL)

    assert car.mod is CarMod.MOD_4_WHEEL
    assert fake_api.last_json() == {"mod_val": "WHEEL_4"}


@pytest.mark.asyncio
async def test_set_mode_remembers_mode_when_request_fails(robot_factory):
    car, _ = robot_factory(Car)

    with pytest.raises(TransportFailure):
        await car.set_mode(CarMod.MOD_HOME)

    assert car.mod is CarMod.MOD_HOME
