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

from rocs_client.end_effector.end_effector import EndEffector, EndEffectorScheme


@pytest.mark.asyncio
async def test_control_left_and_right_send_pose(robot_factory):
    effector, sent = robot_factory(EndEffector)

    effector.control_left(EndEffectorScheme(x=0.1, y=0.2, z=0.3, qw=1))
    effector.control_right(EndEffectorScheme(z=-0.1))

    assert [envelope.command for envelope in sent] == ["left_hand_pr", "right_hand_pr"]
    assert sent[0].data["param"] == {
        "x": 0.1, "y": 0.2, "z": 0.3,
        "qx": 0, "qy": 0, "qz": 0, "qw": 1,
        "vx": 0, "vy": 0, "vz": 0,
    }
    assert sent[1].data["param"]["z"] == -0.1


@pytest.mark.asyncio
async def test_enable_and_disable(robot_factory, fake_api):
    fake_api.routes[("GET", "/robot/end_effector/enable")] = {"code": 0, "data": "enabled"}
    fake_api.routes[("GET", "/robot/end_effector/disable")] = {"code": 0, "data": "disabled"}
    effector, _ = robot_factory(EndEffector)

    assert (await effector.enable())["data"] == "enabled"
    assert (await effector.disable())["data"] == "disabled"


@pytest.mark.asyncio
async def test_state_broadcast_requests(robot_factory, fake_api):
    fake_api.routes[("GET", "/robot/enable_terminal_state")] = {"code": 0}
    effector, _ = robot_factory(EndEffector)

    await effector.enable_state(frequency=10)
    assert fake_api.requests[-1].url.params["frequency"] == "10"

    await effector.disable_state()
    assert "frequency" not in fake_api.requests[-1].url.params
