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

from pathlib import Path

ROCS_PROJECT_ROOT = Path(__file__).parent.parent
ROCS_LOG_DIR = ROCS_PROJECT_ROOT / "logs"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8001

# Fixed request/response timeout (seconds).
CONTROL_REQUEST_TIMEOUT = 5.0

STREAM_RETRY_DELAY = 1.0
STREAM_MAX_RETRIES = 5

LIMIT_POLL_INTERVAL = 0.5
