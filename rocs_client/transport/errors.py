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


class TransportError(Exception):
    """Raised when the robot cannot be reached or rejects a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportTimeout(TransportError):
    pass


class TransportFailure(TransportError):
    pass


class StreamingSendExhausted(TransportError):
    """A streaming command could not be delivered before the retry budget ran out."""


class LimitsUnavailableError(Exception):
    """The joint limit table never arrived within the configured number of polls."""
