"""JSON file persistence for pipeline records."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a pipeline file cannot be read or parsed."""


def now_rfc3339() -> str:
    """Current local time as an RFC 3339 timestamp with UTC offset."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


def _plain(data: Any) -> Any:
    if hasattr(data, "to_dict"):
        return data.to_dict()
    if isinstance(data, list):
        return [_plain(item) for item in data]
    return data


def save_json(data: Any, path: Union[str, Path]) -> Path:
    """Write ``data`` as pretty-printed UTF-8 JSON to ``path``.

    Records exposing ``to_dict()`` (and lists of them) are converted first.
    """
    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(_plain(data), f, indent=2, ensure_ascii=False)
        f.write("\n")
    logger.debug(f"Saved {path}")
    return path


def load_json(path: Union[str, Path]) -> Any:
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except OSError as e:
        raise StorageError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise StorageError(f"Invalid JSON in {path}: {e}") from e
