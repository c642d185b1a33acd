# src/tracelog/core/logging/shortcuts.py
"""
Module-level log functions bound to the process-wide logger.

    from tracelog import initialize, info, errorw

    initialize()
    info("listening on %s", addr)
    errorw("payment failed", "order", order_id, "error", exc)

Each function forwards to get_logger() with one extra stack level, so the
source location still names the caller of these functions.
"""

from __future__ import annotations

import contextvars
from typing import Any

from .builder import get_logger


def critical(msg: str, *args: Any, ctx: contextvars.Context | None = None) -> None:
    get_logger().critical(msg, *args, ctx=ctx, stacklevel=2)


def error(msg: str, *args: Any, ctx: contextvars.Context | None = None) -> None:
    get_logger().error(msg, *args, ctx=ctx, stacklevel=2)


def errorw(msg: str, *keys_and_values: Any, ctx: contextvars.Context | None = None, **fields: Any) -> None:
    get_logger().errorw(msg, *keys_and_values, ctx=ctx, stacklevel=2, **fields)


def warn(msg: str, *args: Any, ctx: contextvars.Context | None = None) -> None:
    get_logger().warn(msg, *args, ctx=ctx, stacklevel=2)


def info(msg: str, *args: Any, ctx: contextvars.Context | None = None) -> None:
    get_logger().info(msg, *args, ctx=ctx, stacklevel=2)


def infow(msg: str, *keys_and_values: Any, ctx: contextvars.Context | None = None, **fields: Any) -> None:
    get_logger().infow(msg, *keys_and_values, ctx=ctx, stacklevel=2, **fields)


def debug(msg: str, *args: Any, ctx: contextvars.Context | None = None) -> None:
    get_logger().debug(msg, *args, ctx=ctx, stacklevel=2)
