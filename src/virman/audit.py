"""Audit logging around ledger calls.

The ledger itself never logs. Callers that want a record of who moved what
wrap the service call here; the outcome is logged and any error is re-raised
unchanged.
"""

import logging
import time
from typing import Any, Callable, Optional, TypeVar

from virman.domain.errors import DomainError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def audited(
    operation: str,
    call: Callable[..., T],
    *args: Any,
    actor: Optional[str] = None,
    **kwargs: Any,
) -> T:
    """Run ``call(*args, **kwargs)`` and log its outcome under ``operation``."""
    started = time.perf_counter()
    try:
        result = call(*args, **kwargs)
    except DomainError as e:
        logger.warning(
            "%s rejected actor=%s code=%s args=%r kwargs=%r: %s",
            operation, actor, e.code, args, kwargs, e,
        )
        raise
    except Exception:
        logger.exception("%s failed actor=%s args=%r kwargs=%r", operation, actor, args, kwargs)
        raise

    logger.info(
        "%s succeeded actor=%s args=%r kwargs=%r in %.1fms",
        operation, actor, args, kwargs, (time.perf_counter() - started) * 1000,
    )
    return result


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging once for command-line use."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level '{level}'")
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
