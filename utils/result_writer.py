"""Persist downloaded search results as pretty-printed JSON files."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from api.errors import WriteError
from utils.logger import get_logger

logger = get_logger(__name__)


def filesystem_timestamp(now: datetime | None = None) -> str:
    """
    UTC ISO timestamp with millisecond precision and ':' / '.' replaced by '-'.

    Example: 2025-01-31T09:05:07.042Z -> 2025-01-31T09-05-07-042Z
    """
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    iso = now.strftime("%Y-%m-%dT%H:%M:%S") + f".{now.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def timestamped_filename(prefix: str = "search_results", now: datetime | None = None) -> str:
    return f"{prefix}_{filesystem_timestamp(now)}.json"


def save_results(results: Any, filename: str | Path | None = None, prefix: str = "search_results") -> None:
    """
    Write results to a JSON file, replacing any existing file at that path.

    Failures are logged and swallowed; nothing is raised and nothing is returned,
    so callers cannot tell a failed save from a successful one.

    Args:
        results: Any JSON-serializable value
        filename: Target path. Defaults to {prefix}_{timestamp}.json in the working directory.
        prefix: Filename prefix used when filename is not given
    """
    path = Path(filename) if filename else Path(timestamped_filename(prefix))

    try:
        # Serialize first so a bad payload never truncates an existing file
        text = json.dumps(results, indent=2, ensure_ascii=False)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except (OSError, TypeError, ValueError) as e:
        error = WriteError(str(path), e)
        logger.error(
            str(error),
            exc_info=True,
            extra={"extra_fields": {"path": str(path), "error_type": type(e).__name__}},
        )
        return

    logger.info(f"Results saved to: {path}", extra={"extra_fields": {"path": str(path)}})
