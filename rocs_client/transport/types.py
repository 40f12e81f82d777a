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

"""Value types shared by the request/response and streaming channels."""

from dataclasses import dataclass, field
from enum import Enum
import json
from typing import Any

from pydantic import BaseModel, ConfigDict

from rocs_client.constants import DEFAULT_HOST, DEFAULT_PORT


class ConnectOption(BaseModel):
    """Where the robot lives. Determines both channel URLs."""

    model_config = ConfigDict(frozen=True)

    ssl: bool = False
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @property
    def base_url(self) -> str:
        scheme = "https" if self.ssl else "http"
        return f"{scheme}://{self.host}:{self.port}"

    @property
    def ws_url(self) -> str:
        scheme = "wss" if self.ssl else "ws"
        return f"{scheme}://{self.host}:{self.port}/ws"


class ConnectionState(Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    ERRORED = "errored"


@dataclass(frozen=True)
class OutboundEnvelope:
    """Wire unit of the streaming channel. No ack, no sequence number."""

    command: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> str:
        return json.dumps({"command": self.command, "data": self.data})


@dataclass(frozen=True)
class ControlRequest:
    method: str
    path: str
    params: dict[str, Any] | None = None
    body: dict[str, Any] | None = None


__all__ = ["ConnectOption", "ConnectionState", "ControlRequest", "OutboundEnvelope"]
