"""Run context binding for structured logging.

Binds a run identifier to every log line emitted during one export run so
the audit and role pipelines of a single invocation can be correlated.

Usage:
    from infrastructure.logging import bind_run_context

    with bind_run_context(command="all"):
        logger.info("export_started")
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_run_context(
    run_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind run-scoped context to all logs within the context manager.

    Args:
        run_id: Unique run identifier. Auto-generated if not provided.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The run id bound for the duration of the block.
    """
    context: dict[str, Any] = {"run_id": run_id or str(uuid.uuid4())}
    context.update(extra_context)

    previous = structlog.contextvars.get_contextvars()
    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["run_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())
        restored = {k: previous[k] for k in context if k in previous}
        if restored:
            structlog.contextvars.bind_contextvars(**restored)


def get_run_id() -> Optional[str]:
    """Get the current run id from the logging context, if any."""
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("run_id")


def clear_run_context() -> None:
    """Clear all run-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
