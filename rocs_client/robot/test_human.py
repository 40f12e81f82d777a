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

import asyncio

import pytest

from rocs_client.robot.human import ArmAction, BodyAction, HandAction, Human
from rocs_client.transport.errors import TransportFailure


@pytest.mark.asyncio
async def test_walk_clamps_angle_and_speed(robot_factory):
    human, sent = robot_factory(Human)

    assert human.walk(90, -2) is None

    assert sent[0].command == "move"
    assert sent[0].data == {"angle": 45.0, "speed": -0.8}


@pytest.mark.asyncio
async def test_walk_missing_value_becomes_zero(robot_factory):
    human, sent = robot_factory(Human)

    human.walk(None, 0.3)

    assert sent[0].data == {"angle": 0, "speed": 0.3}


@pytest.mark.asyncio
async def test_head_clamps_each_axis(robot_factory):
    human, sent = robot_factory(Human)

    human.head(20, -20, 5)

    assert sent[0].command == "head"
    assert sent[0].data == {"roll": 17.1887, "pitch": -17.1887, "yaw": 5}


@pytest.mark.asyncio
async def test_body_clamps_squat_and_waist(robot_factory):
    human, sent = robot_factory(Human)

    human.body(-1, 30)

    assert sent[0].command == "lower_body"
    assert sent[0].data == {"squat": -0.15, "rotate_waist": 14.32}


@pytest.mark.asyncio
async def test_stand_posts_to_robot(robot_factory, fake_api):
    fake_api.routes[("POST", "/robot/stand")] = {"code": 0, "msg": "ok"}
    human, _ = robot_factory(Human)

    assert await human.stand() == {"code": 0, "msg": "ok"}


@pytest.mark.asyncio
async def test_start_and_stop(robot_factory, fake_api):
    fake_api.routes[("POST", "/robot/start")] = {"code": 0}
    fake_api.routes[("POST", "/robot/stop")] = {"code": 0}
    human, _ = robot_factory(Human)

    await human.start()
    await human.stop()

    paths = [r.url.path for r in fake_api.requests]
    assert "/robot/start" in paths
    assert "/robot/stop" in paths


@pytest.mark.asyncio
async def test_upper_body_sends_only_given_actions(robot_factory, fake_api):
    fake_api.routes[("POST", "/robot/upper_body")] = {"code": 0}
    human, _ = robot_factory(Human)

    await human.upper_body(arm_action=ArmAction.HELLO)
    assert fake_api.last_json() == {"arm_action": "HELLO"}

    await human.upper_body(arm_action=ArmAction.RESET, hand_action=HandAction.GRASP)
    assert fake_api.last_json() == {"arm_action": "RESET", "hand_action": "GRASP"}


@pytest.mark.asyncio
async def test_lower_body_action(robot_factory, fake_api):
    fake_api.routes[("POST", "/robot/lower_body")] = {"code": 0}
    human, _ = robot_factory(Human)

    await human.lower_body(BodyAction.SQUAT)

    assert fake_api.last_json() == {"lower_body_mode": "SQUAT"}


@pytest.mark.asyncio
async def test_enable_debug_state_passes_frequency(robot_factory, fake_api):
    fake_api.routes[("GET", "/robot/enable_states_listen")] = {"code": 0}
    human, _ = robot_factory(Human)

    await human.enable_debug_state(5)

    assert fake_api.requests[-1].url.params["frequence"] == "5"


@pytest.mark.asyncio
async def test_control_service_endpoints(robot_factory, fake_api):
    for name in ("start", "close", "status", "log"):
        fake_api.routes[("GET", f"/robot/sdk_ctrl/{name}")] = {"code": 0, "data": name}
    human, _ = robot_factory(Human)

    assert (await human.control_svr_start())["data"] == "start"
    assert (await human.control_svr_close())["data"] == "close"
    assert (await human.control_svr_status())["data"] == "status"
    assert (await human.control_svr_log_view())["data"] == "log"


@pytest.mark.asyncio
async def test_control_failure_propagates(robot_factory):
    human, _ = robot_factory(Human)

    with pytest.raises(TransportFailure) as excinfo:
        await human.get_joint_states()
    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_move_joint_clamps_after_limits_arrive(robot_factory):
    human, sent = robot_factory(Human)
    assert await asyncio.wait_for(human.limits_loaded, 1.0) is True

    assert human.move_joint([{"no": "1", "orientation": "left", "angle": 50}]) is None

    assert sent[0].command == "move_joint"
    assert sent[0].data == {"command": [{"no": "1", "orientation": "left", "angle": 10}]}
