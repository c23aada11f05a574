#!/usr/bin/env python3
"""Configuration dataclasses for github2gitea-mirror."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class Mode(Enum):
    """Enumeration for the mirror run modes."""
    ORG = "org"
    STAR = "star"
    REPO = "repo"
    USER = "user"


class Visibility(Enum):
    """Enumeration for repository and organization visibility levels."""
    PRIVATE = "private"
    PUBLIC = "public"


# Parameters each mode needs before any request is made
REQUIRED_PARAMETERS: Dict[Mode, Tuple[str, ...]] = {
    Mode.ORG: ("org", "visibility"),
    Mode.STAR: ("org", "user"),
    Mode.REPO: ("repo", "user"),
    Mode.USER: ("user",),
}


@dataclass
class GiteaConfig:
    """Gitea-specific configuration."""
    url: str
    token: str
    timeout_s: float = 30.0


@dataclass
class GitHubConfig:
    """GitHub-specific configuration."""
    api_url: str
    token: str
    username: Optional[str]


@dataclass
class MirrorConfig:
    """Mirror run configuration."""
    mode: Mode
    org: Optional[str]
    visibility: Optional[Visibility]
    repo: Optional[str]
    exclude: Optional[str] = None
    dry_run: bool = False


@dataclass
class Config:
    """Main configuration for GitHub-to-Gitea mirroring."""
    gitea: GiteaConfig
    github: GitHubConfig
    mirror: MirrorConfig
