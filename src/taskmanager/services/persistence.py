from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from taskmanager.domain.errors import PersistenceError


@asynccontextmanager
async def persistence_guard(logger: logging.Logger, event: str, **context: Any) -> AsyncIterator[None]:
    """Wrap repository calls: log the failure with context, re-raise as PersistenceError."""
    try:
        yield
    except PersistenceError:
        raise
    except Exception as exc:
        logger.exception(
            event,
            extra={"category": context.pop("category", "db"), "event": event, **context},
        )
        raise PersistenceError(event) from exc
