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

"""structlog setup shared by every module.

Records go to two places: a console renderer on stdout and a rotating
JSON-lines file, one file per process. Every module calls
`logger = setup_logger()` once at import time; handlers are attached a
single time to the `rocs_client` logger and the module loggers propagate
to it.
"""

from datetime import datetime
import inspect
import logging
import logging.handlers
import os
from pathlib import Path
import sys
import tempfile
import traceback
from types import TracebackType
from typing import Any

from rich.console import Console
from rich.traceback import Traceback
import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder

from rocs_client.constants import ROCS_LOG_DIR, ROCS_PROJECT_ROOT

PACKAGE_LOGGER = "rocs_client"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 20

for _noisy in ("websockets.client", "websockets.server", "asyncio"):
    logging.getLogger(_noisy).setLevel(logging.ERROR)
for _noisy in ("httpx", "httpcore"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

_log_file_path: Path | None = None


def _log_directory() -> Path:
    if (ROCS_PROJECT_ROOT / ".git").exists():
        candidate = ROCS_LOG_DIR
    else:
        state_home = os.getenv("XDG_STATE_HOME")
        base = Path(state_home) if state_home else Path.home() / ".local" / "state"
        candidate = base / "rocs_client" / "logs"

    for directory in (candidate, Path(tempfile.gettempdir()) / "rocs_client" / "logs"):
        try:
            directory.mkdir(parents=True, exist_ok=True)
            return directory
        except OSError:
            continue
    raise OSError(f"No writable log directory (tried {candidate})")


def log_file_path() -> Path:
    """Path of this process's JSON-lines log file."""
    global _log_file_path
    if _log_file_path is None:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        _log_file_path = _log_directory() / f"rocs_{stamp}_{os.getpid()}.jsonl"
    return _log_file_path


def _level_from_env() -> int:
    name = os.getenv("ROCS_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _configure() -> None:
    if structlog.is_configured():
        return

    pre_chain: list[Any] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        CallsiteParameterAdder(parameters=[CallsiteParameter.FUNC_NAME, CallsiteParameter.LINENO]),
    ]
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = _level_from_env()
    root = logging.getLogger(PACKAGE_LOGGER)
    root.setLevel(level)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
            ],
        )
    )
    root.addHandler(console)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path(),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ],
        )
    )
    root.addHandler(file_handler)


def setup_logger(name: str | None = None) -> Any:
    """Return a structlog logger for the calling module.

    Args:
        name: Logger name. Defaults to the caller's module name, so records
            from `rocs_client.transport.stream` are tagged with it.
    """
    _configure()
    if name is None:
        frame = inspect.currentframe()
        caller = frame.f_back if frame is not None else None
        name = caller.f_globals.get("__name__", PACKAGE_LOGGER) if caller else PACKAGE_LOGGER
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return structlog.get_logger(name)


def setup_exception_handler() -> None:
    """Log uncaught exceptions and print them with rich. Used by the CLI."""

    def handle_exception(
        exc_type: type[BaseException],
        exc_value: BaseException,
        exc_traceback: TracebackType | None,
    ) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        setup_logger("rocs_client.cli").error(
            "Uncaught exception",
            exc_info=(exc_type, exc_value, exc_traceback),
            exception_type=exc_type.__name__,
            traceback_lines=traceback.format_exception(exc_type, exc_value, exc_traceback),
        )
        Console(stderr=True).print(Traceback.from_exception(exc_type, exc_value, exc_traceback))

    sys.excepthook = handle_exception
