"""Recover an absolute target path from a stored relative path."""

import logging
import os
from collections.abc import Callable

LOGGER = logging.getLogger(__name__)


def _native(path: str) -> str:
    # Links written on Windows store backslash-separated relative paths
    if os.sep != "\\":
        return path.replace("\\", os.sep)
    return path


def resolve_path(
    hint: str | None,
    link_dir: str | None,
    working_dir: str | None,
    cached: str | None = None,
    exists: Callable[[str], bool] = os.path.exists,
    canonicalize: Callable[[str], str] = os.path.abspath,
) -> str | None:
    """Return the absolute target path for a link.

    Resolution is best-effort and never raises:

    1. a non-empty *cached* path is returned unchanged;
    2. without a *hint* there is nothing to resolve, so ``None``;
    3. ``link_dir/hint`` if it exists, canonicalized;
    4. ``working_dir/hint`` if it exists, canonicalized;
    5. otherwise *hint* verbatim.
    """
    if cached:
        return cached
    if not hint:
        return None

    rel = _native(hint)
    for base in (link_dir, working_dir):
        if not base:
            continue
        candidate = os.path.join(_native(base), rel)
        try:
            found = exists(candidate)
        except (OSError, ValueError):
            found = False
        if not found:
            continue
        try:
            resolved = canonicalize(candidate)
        except (OSError, ValueError):
            resolved = candidate
        LOGGER.debug("resolved %r -> %r", hint, resolved)
        return resolved or candidate

    LOGGER.debug("could not resolve %r, keeping it verbatim", hint)
    return hint
