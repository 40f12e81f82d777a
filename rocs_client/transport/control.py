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

"""Request/response channel for control-plane calls."""

from typing import Any

import httpx

from rocs_client.constants import CONTROL_REQUEST_TIMEOUT
from rocs_client.transport.errors import TransportFailure, TransportTimeout
from rocs_client.transport.types import ControlRequest
from rocs_client.utils.logging_config import setup_logger

logger = setup_logger()


class ControlChannel:
    """HTTP client bound to a single robot endpoint.

    Every call uses a fixed timeout and is never retried here; the caller
    decides what to do with a failure.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = CONTROL_REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the control channel.

        Args:
            base_url: ``scheme://host:port`` of the robot.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, used to fake the robot in tests.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def request(self, request: ControlRequest) -> Any:
        """Issue a control request and return the parsed JSON body.

        Raises:
            TransportTimeout: No response within the timeout.
            TransportFailure: Unreachable endpoint, non-success status or a body that is not JSON.
        """
        client = self._get_client()
        try:
            response = await client.request(
                request.method,
                request.path,
                params=request.params,
                json=request.body,
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning("Control request timed out", method=request.method, path=request.path)
            raise TransportTimeout(
                f"{request.method} {request.path} timed out after {self.timeout} seconds"
            ) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(
                "Control request rejected", method=request.method, path=request.path, status=status
            )
            raise TransportFailure(
                f"{request.method} {request.path} failed with status {status}", status_code=status
            ) from e
        except httpx.RequestError as e:
            logger.warning(
                "Control request failed", method=request.method, path=request.path, error=str(e)
            )
            raise TransportFailure(f"{request.method} {request.path} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise TransportFailure(
                f"{request.method} {request.path} returned a non-JSON body",
                status_code=response.status_code,
            ) from e

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
