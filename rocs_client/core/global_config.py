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

from pydantic_settings import BaseSettings, SettingsConfigDict

from rocs_client.constants import (
    CONTROL_REQUEST_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    LIMIT_POLL_INTERVAL,
    STREAM_MAX_RETRIES,
    STREAM_RETRY_DELAY,
)
from rocs_client.transport.types import ConnectOption


class GlobalConfig(BaseSettings):
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    ssl: bool = False
    request_timeout: float = CONTROL_REQUEST_TIMEOUT
    stream_retry_delay: float = STREAM_RETRY_DELAY
    stream_max_retries: int = STREAM_MAX_RETRIES
    limit_poll_interval: float = LIMIT_POLL_INTERVAL
    # None keeps polling until the limit table arrives.
    limit_max_polls: int | None = None

    model_config = SettingsConfigDict(
        env_prefix="ROCS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    def connect_option(self) -> ConnectOption:
        return ConnectOption(ssl=self.ssl, host=self.host, port=self.port)
