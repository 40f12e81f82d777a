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

"""Client library for driving GR robots over HTTP and WebSocket.

Example:
    >>> import asyncio
    >>> from rocs_client import ConnectOption, Human, JointTarget
    >>>
    >>> async def main():
    ...     async with Human(ConnectOption(host="192.168.10.101")) as human:
    ...         await human.start()
    ...         human.walk(0, 0.2)
    ...         # Held until the joint limits are known, then clamped to them
    ...         human.move_joint([JointTarget("1", "left", 30.0)])
    >>>
    >>> asyncio.run(main())
"""

import lazy_loader as lazy

__getattr__, __dir__, __all__ = lazy.attach(
    __name__,
    submod_attrs={
        "common.camera": ["Camera"],
        "core.global_config": ["GlobalConfig"],
        "end_effector.end_effector": ["EndEffector", "EndEffectorScheme"],
        "motor.dispatcher": [
            "JointCommandDispatcher",
            "JointTarget",
            "MotorScheme",
            "ReadinessPolicy",
        ],
        "motor.limits": ["JointLimit", "LimitCache"],
        "motor.motor": ["Motor"],
        "robot.car": ["Car", "CarMod"],
        "robot.discovery": ["connect_robot", "get_robot_type"],
        "robot.human": ["ArmAction", "BodyAction", "HandAction", "Human"],
        "robot.robot_base": ["RobotBase"],
        "transport.core": ["RobotTransport"],
        "transport.errors": [
            "LimitsUnavailableError",
            "StreamingSendExhausted",
            "TransportError",
            "TransportFailure",
            "TransportTimeout",
        ],
        "transport.stream": ["RetryPolicy", "StreamingChannel"],
        "transport.types": [
            "ConnectOption",
            "ConnectionState",
            "ControlRequest",
            "OutboundEnvelope",
        ],
        "utils.params": ["cover_param"],
    },
)
