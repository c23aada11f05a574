#!/usr/bin/env python3
"""Mapping of GitHub repositories onto Gitea migration requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from config import Visibility
from utils import truncate_description


@dataclass(frozen=True)
class SourceRepository:
    """A repository as listed by the source host."""
    name: str
    clone_url: str
    description: Optional[str]
    visibility: str

    @property
    def is_private(self) -> bool:
        return self.visibility == Visibility.PRIVATE.value

    @classmethod
    def from_github(cls, repo: Any) -> "SourceRepository":
        """Build from a PyGithub Repository.

        Older API responses carry no ``visibility`` field, in which case it is
        derived from the ``private`` flag.
        """
        visibility = getattr(repo, "visibility", None)
        if not visibility:
            private = bool(getattr(repo, "private", False))
            visibility = (
                Visibility.PRIVATE.value if private else Visibility.PUBLIC.value
            )
        return cls(
            name=repo.name,
            clone_url=repo.clone_url,
            description=getattr(repo, "description", None),
            visibility=visibility,
        )


@dataclass(frozen=True)
class SourceCredentials:
    """Credentials Gitea uses to pull from a private source repository."""
    username: str
    token: str


@dataclass(frozen=True)
class MigrationRequest:
    """Payload for ``POST /api/v1/repos/migrate``.

    Exactly one of ``uid`` (numeric owner id, bulk modes) or ``repo_owner``
    (owner name, single repository mode) is set.
    """
    repo_name: str
    clone_addr: str
    description: str
    private: bool
    uid: Optional[int] = None
    repo_owner: Optional[str] = None
    credentials: Optional[SourceCredentials] = None
    mirror: bool = True

    def __post_init__(self) -> None:
        if (self.uid is None) == (self.repo_owner is None):
            raise ValueError("exactly one of uid or repo_owner must be set")

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.uid is not None:
            payload["uid"] = self.uid
        else:
            payload["repo_owner"] = self.repo_owner
        payload.update(
            {
                "repo_name": self.repo_name,
                "clone_addr": self.clone_addr,
                "description": self.description,
                "mirror": self.mirror,
                "private": self.private,
            }
        )
        if self.credentials is not None:
            payload["auth_username"] = self.credentials.username
            payload["auth_password"] = self.credentials.token
        return payload


def build_migration_request(
    repo: SourceRepository,
    owner: Union[int, str],
    credentials: SourceCredentials,
) -> MigrationRequest:
    """Map one source repository to a mirror migration request.

    An integer ``owner`` addresses the Gitea owner by id (``uid``); a string
    addresses it by name (``repo_owner``). Credentials are attached only for
    private repositories.
    """
    if isinstance(owner, bool) or not isinstance(owner, (int, str)):
        raise TypeError(f"unsupported owner reference: {owner!r}")

    return MigrationRequest(
        repo_name=repo.name,
        clone_addr=repo.clone_url,
        description=truncate_description(repo.description),
        private=repo.is_private,
        uid=owner if isinstance(owner, int) else None,
        repo_owner=owner if isinstance(owner, str) else None,
        credentials=credentials if repo.is_private else None,
    )
