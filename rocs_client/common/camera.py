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

from typing import TYPE_CHECKING

from rocs_client.transport.errors import TransportError
from rocs_client.transport.types import ControlRequest
from rocs_client.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from rocs_client.transport.core import RobotTransport

logger = setup_logger()


class Camera:
    """Video stream discovery. Only reports where the stream is served."""

    def __init__(self, transport: RobotTransport) -> None:
        self._transport = transport
        self.video_stream_url: str | None = None
        self.video_stream_status = False

    async def refresh(self) -> bool:
        """Ask the robot whether its camera stream is available."""
        try:
            response = await self._transport.send_control_request(
                ControlRequest("GET", "/control/camera_status")
            )
        except TransportError as e:
            logger.error(
                "The video stream on the robot is unavailable. Check that the camera is "
                "connected and the model is correct, then restart the device.",
                error=str(e),
            )
            return False

        self.video_stream_status = bool(response.get("data")) if isinstance(response, dict) else False
        if self.video_stream_status:
            self.video_stream_url = f"{self._transport.base_url}/control/camera"
            logger.info("Robot video stream is ready for use", url=self.video_stream_url)
        else:
            self.video_stream_url = None
        return self.video_stream_status
