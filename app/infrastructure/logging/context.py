"""Cycle context binding for structured logging.

Binds a cycle identifier to every log entry emitted while a processing
cycle runs, so all lines of one pass can be grouped together.

Usage:
    from infrastructure.logging import bind_cycle_context

    with bind_cycle_context():
        logger.info("cycle_started")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_cycle_context(
    cycle_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind cycle-scoped context to all logs within the context manager.

    Args:
        cycle_id: Identifier for this cycle. Auto-generated if not provided.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The cycle identifier that was bound.
    """
    context: dict[str, Any] = {"cycle_id": cycle_id or uuid.uuid4().hex[:12]}
    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["cycle_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_cycle_id() -> Optional[str]:
    """Get the current cycle ID from the logging context."""
    return structlog.contextvars.get_contextvars().get("cycle_id")
