# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""utils.py"""
from __future__ import annotations

import inspect
import logging
import os
import re
from typing import Any, Callable

import pythonjsonlogger.json
from rich.logging import RichHandler

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def is_coroutine(function: Callable[..., Any]) -> bool:
    return inspect.iscoroutinefunction(function)


def to_kebab_case(identifier: str) -> str:
    """
    Convert a Python identifier to the lowercase, dash-separated form used for
    long option and command names.

    `allow_long_names`, `allowLongNames` and `AllowLongNames` all become
    `allow-long-names`; acronyms stay together (`URLHandler` -> `url-handler`).
    """
    words = _WORD_BOUNDARY.sub("_", identifier.strip("_"))
    return "-".join(part for part in words.lower().split("_") if part)


LOG_FORMAT = "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"
JSON_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
LOG_MODES = ("cli", "json")


def running_in_container() -> bool:
    try:
        with open("/proc/1/cgroup", "r", encoding="UTF-8") as cgroup:
            content = cgroup.read()
    except OSError:
        return False
    return any(
        runtime in content for runtime in ("docker", "kubepods", "containerd", "podman")
    )


def _console_handler(mode: str) -> logging.Handler:
    if mode == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(pythonjsonlogger.json.JsonFormatter(JSON_LOG_FORMAT))
        return handler
    return RichHandler(
        rich_tracebacks=True,
        show_path=False,
        markup=False,
        log_time_format="[%Y-%m-%d %H:%M:%S]",
    )


def _file_handler(filename: str, as_json: bool) -> logging.Handler:
    handler = logging.FileHandler(filename, "a", "UTF-8")
    if as_json:
        handler.setFormatter(pythonjsonlogger.json.JsonFormatter(JSON_LOG_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    mode: str | None = None,
    log_filename: str | None = None,
    json_log_to_file: bool = False,
    file_log_level: int = logging.DEBUG,
    console_log_level: int = logging.WARNING,
):
    """
    Configure logging for declarg with either rich console output or
    structured JSON output.

    Parsing itself never configures logging; applications call this once at
    startup if they want to see what the parser is doing (every command level,
    matched option and declaration warning is logged on the "declarg" logger).

    Args:
        mode (str | None):
            "cli" for rich console logs (the default outside containers) or
            "json" for JSON lines (the default inside containers). Falls back
            to the `DECLARG_LOG_MODE` environment variable when omitted.
        log_filename (str | None):
            Path to a log file. No file handler is installed when omitted.
        json_log_to_file (bool):
            Write the log file as JSON instead of plain text.
        file_log_level (int):
            Logging level for file output. Defaults to `logging.DEBUG`.
        console_log_level (int):
            Logging level for console output. Defaults to `logging.WARNING`.

    Raises:
        ValueError: If `mode` is neither "cli" nor "json".
    """
    mode = mode or os.getenv("DECLARG_LOG_MODE") or (
        "json" if running_in_container() else "cli"
    )
    if mode not in LOG_MODES:
        raise ValueError(f"Invalid log mode: {mode}")

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    console_handler = _console_handler(mode)
    console_handler.setLevel(console_log_level)
    root.addHandler(console_handler)

    if log_filename:
        file_handler = _file_handler(log_filename, json_log_to_file)
        file_handler.setLevel(file_log_level)
        root.addHandler(file_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("declarg").debug("Logging initialized in '%s' mode.", mode)
