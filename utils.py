#!/usr/bin/env python3
"""Utility functions for github2gitea-mirror."""

import re
from typing import Optional, Tuple

from security import SecurityValidator

# Gitea rejects repository descriptions longer than this
MAX_DESCRIPTION_LENGTH = 255

_URL_PREFIX = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+.-]*://[^/]+/|git@[^:]+:)")


def normalize_repo_reference(reference: str) -> Tuple[str, str]:
    """Reduce a repository URL or path to its (owner, name) pair.

    Example: 'https://github.com/acme/widgets.git' -> ('acme', 'widgets')
    """
    candidate = _URL_PREFIX.sub("", reference.strip()).strip("/")
    if candidate.endswith(".git"):
        candidate = candidate[: -len(".git")]

    parts = [p for p in candidate.split("/") if p]
    if len(parts) != 2:
        raise ValueError(
            f"repository reference '{reference}' is not of the form owner/name"
        )

    owner = SecurityValidator.validate_name(parts[0], "Repository owner")
    name = SecurityValidator.validate_name(parts[1], "Repository name")
    return owner, name


def truncate_description(description: Optional[str]) -> str:
    if not description:
        return ""
    return description[:MAX_DESCRIPTION_LENGTH]
