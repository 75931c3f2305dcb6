"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Logging configuration for Permit Setup.

Provides centralized structured logging setup with JSON output for automation
and human-readable output for interactive use. Supports correlation IDs so
that every API call made by one CLI run can be traced together.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from structlog.types import EventDict


_correlation_id: ContextVar[Optional[str]] = ContextVar("permit_setup_correlation_id", default=None)


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """structlog processor stamping the run's correlation id, when one is set."""
    correlation_id = _correlation_id.get()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Tag every following event of this run; a UUID is generated when omitted."""
    correlation_id = correlation_id or str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    _correlation_id.set(None)


def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()


def _handler(log_file: Optional[Path]) -> logging.Handler:
    if log_file is None:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
    else:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _processors(json_format: bool, colors: bool) -> list:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=colors)
    )
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_correlation_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_format: bool = False,
) -> None:
    """
    Route structlog through the stdlib root logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL; unknown names mean INFO
        log_file: Write here instead of stderr (parent directories are created)
        json_format: One JSON object per line instead of the console renderer
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    # Repeated calls replace the handler instead of duplicating output
    root_logger.handlers.clear()
    handler = _handler(log_file)
    handler.setLevel(numeric_level)
    root_logger.addHandler(handler)

    structlog.configure(
        processors=_processors(json_format, colors=log_file is None),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger namespaced under ``permit_setup.``."""
    if name.startswith("permit_setup"):
        return structlog.get_logger(name)
    return structlog.get_logger(f"permit_setup.{name}")


# Event helpers shared by the client, repositories and reset stages

def log_api_failure(
    logger: structlog.stdlib.BoundLogger,
    method: str,
    endpoint: str,
    status: Optional[int] = None,
    reason: str = "unknown",
    **kwargs: Any,
) -> None:
    """
    Log a failed administrative API call.

    Rejections (a response with a non-success status) are warnings; transport
    failures (no response at all) are errors.

    Args:
        logger: Logger instance
        method: HTTP method
        endpoint: Path relative to the API base URL
        status: HTTP status if a response was received
        reason: Response body or error message
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "api_call_failed",
        "method": method,
        "endpoint": endpoint,
        "reason": reason,
    }

    if status is not None:
        log_data["status"] = status

    log_data.update(kwargs)

    if status is not None:
        logger.warning("api_call_failed", **log_data)
    else:
        logger.error("api_call_failed", **log_data)


def log_entity_outcome(
    logger: structlog.stdlib.BoundLogger,
    entity: str,
    key: str,
    operation: str,
    outcome: str,
    **kwargs: Any,
) -> None:
    """
    Log the outcome of a create or delete against one remote entity.

    Args:
        logger: Logger instance
        entity: Entity label ("resource", "role", "user set", ...)
        key: Entity key
        operation: "create", "update" or "delete"
        outcome: "created", "exists", "updated", "deleted", "absent" or "failed"
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "entity_change",
        "entity": entity,
        "key": key,
        "operation": operation,
        "outcome": outcome,
    }

    log_data.update(kwargs)

    if outcome == "failed":
        logger.warning(f"{entity}_{operation}_failed", **log_data)
    else:
        logger.info(f"{entity}_{outcome}", **log_data)


def log_reset_stage(
    logger: structlog.stdlib.BoundLogger,
    stage: str,
    deleted: int,
    skipped: int,
    failed: int,
    **kwargs: Any,
) -> None:
    """
    Log the summary of a single reset stage.

    Args:
        logger: Logger instance
        stage: Stage name
        deleted: Number of items deleted (or already absent)
        skipped: Number of protected items left in place
        failed: Number of items the remote service refused to delete
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "reset_stage",
        "stage": stage,
        "deleted": deleted,
        "skipped": skipped,
        "failed": failed,
    }

    log_data.update(kwargs)

    if failed:
        logger.warning("reset_stage_completed", **log_data)
    else:
        logger.info("reset_stage_completed", **log_data)
