"""Retry markers stored on request descriptors.

A marker records that a request has already been retried once for a given
retry reason. Markers are keyed by the coordinator tag, so coordinators with
different tags never see each other's marks.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any

from .config import get_config
from .exceptions import ConfigurationError


def marker_key(tag: str) -> str:
    """Build the marker key for a coordinator tag.

    Args:
        tag: Coordinator tag

    Returns:
        Key under which the marker is stored

    Raises:
        ConfigurationError: If tag is empty
    """
    if not tag:
        raise ConfigurationError("Retry tag must be a non-empty string")
    return f"{get_config().marker_prefix}{tag}"


def mark_retried(request: Any, tag: str) -> None:
    """Mark request as retried for tag, mutating it in place."""
    key = marker_key(tag)
    if isinstance(request, MutableMapping):
        request[key] = True
    else:
        setattr(request, key, True)


def is_retried(request: Any, tag: str) -> bool:
    """Check whether request carries the marker for tag."""
    key = marker_key(tag)
    if isinstance(request, Mapping):
        return bool(request.get(key, False))
    return bool(getattr(request, key, False))
