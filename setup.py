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

from setuptools import find_packages, setup

setup(
    name="rocs_client",
    version="1.3.0",
    description="Client library for controlling humanoid and wheeled robots over HTTP and WebSocket",
    license="Apache-2.0",
    python_requires=">=3.10",
    packages=find_packages(include=["rocs_client", "rocs_client.*"]),
    package_dir={"": "."},
    install_requires=[
        "httpx>=0.27",
        "websockets>=12.0",
        "reactivex>=4.0",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "structlog>=24.1",
        "rich>=13.0",
        "typer>=0.12",
        "lazy_loader>=0.4",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "rocs=rocs_client.robot.cli.rocs_robot:main",
        ],
    },
)
