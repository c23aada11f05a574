#!/usr/bin/env python3
"""Gitea API wrapper for resolving owners and creating mirror repositories."""

from __future__ import annotations

import sys
from enum import Enum
from typing import Optional

import requests

from config import GiteaConfig, Visibility
from logging_utils import Logger
from migration_builder import MigrationRequest

# Exit codes
EXIT_AUTH_ERROR = 40
EXIT_GITEA_ERROR = 31

# Status codes Gitea answers with when the target already exists
MIGRATE_EXISTS_STATUS = 409
ORG_EXISTS_STATUS = 422


class SubmitOutcome(Enum):
    """Result of a single write against Gitea."""
    CREATED = "created"
    EXISTS = "exists"
    FAILED = "failed"


class GiteaTarget:
    """Wrapper around the Gitea REST API (``/api/v1``)."""

    def __init__(self, config: GiteaConfig) -> None:
        self.config = config
        self.api_url = f"{config.url.rstrip('/')}/api/v1"
        self.login: Optional[str] = None

    def _get_api_headers(self) -> dict:
        """Get standard API headers for Gitea requests."""
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.token}",
        }

    def connect(self) -> None:
        """Verify the token against ``/user`` before any write."""
        Logger.info(f"init gitea API: {self.api_url}")
        response = self._get("/user", "authenticated user")
        if response.status_code == 401:
            Logger.error(
                "unauthorized (401): token invalid or not authorized for Gitea API"
            )
            sys.exit(EXIT_AUTH_ERROR)
        if response.status_code != 200:
            Logger.error(
                f"unexpected response checking gitea user: {response.status_code} "
                f"{response.text}"
            )
            sys.exit(EXIT_GITEA_ERROR)
        self.login = response.json().get("login")
        Logger.debug(f"gitea login: {self.login}")

    def _get(self, path: str, what: str) -> requests.Response:
        try:
            return requests.get(
                f"{self.api_url}{path}",
                headers=self._get_api_headers(),
                timeout=self.config.timeout_s,
            )
        except requests.RequestException as e:
            Logger.error(f"failed to contact gitea api for {what}: {e}")
            sys.exit(EXIT_GITEA_ERROR)

    def _resolve_id(self, path: str, what: str) -> int:
        response = self._get(path, what)
        if response.status_code != 200:
            Logger.error(
                f"failed to resolve {what} ({response.status_code}): {response.text}"
            )
            sys.exit(EXIT_GITEA_ERROR)
        try:
            uid = int(response.json()["id"])
        except (ValueError, KeyError, TypeError) as e:
            Logger.error(f"malformed response resolving {what}: {e}")
            sys.exit(EXIT_GITEA_ERROR)
        Logger.info(f"UID set to {uid}")
        return uid

    def get_org_id(self, org: str) -> int:
        Logger.info(f"resolving UID for gitea organization {org}")
        return self._resolve_id(f"/orgs/{org}", f"organization '{org}'")

    def get_user_id(self, user: str) -> int:
        Logger.info(f"resolving UID for gitea user {user}")
        return self._resolve_id(f"/users/{user}", f"user '{user}'")

    def create_org(self, org: str, visibility: Visibility) -> SubmitOutcome:
        Logger.info(
            f"creating organization with name: {org} and visibility: "
            f"{visibility.value}"
        )
        return self._post(
            "/orgs",
            {"username": org, "visibility": visibility.value},
            f"organization '{org}'",
            ORG_EXISTS_STATUS,
        )

    def migrate_repo(self, request: MigrationRequest) -> SubmitOutcome:
        Logger.info(f"migrating repo {request.repo_name}")
        return self._post(
            "/repos/migrate",
            request.to_payload(),
            f"repo '{request.repo_name}'",
            MIGRATE_EXISTS_STATUS,
        )

    def _post(
        self, path: str, payload: dict, what: str, exists_status: int
    ) -> SubmitOutcome:
        """POST a creation request; ``exists_status`` counts as success."""
        try:
            response = requests.post(
                f"{self.api_url}{path}",
                headers=self._get_api_headers(),
                json=payload,
                timeout=self.config.timeout_s,
            )
        except requests.RequestException as e:
            Logger.error(f"failed to create {what}: {e}")
            return SubmitOutcome.FAILED

        if response.status_code in (200, 201):
            Logger.success(f"created {what}")
            return SubmitOutcome.CREATED
        if response.status_code == exists_status:
            Logger.warn(f"{what} already exists, skipping")
            return SubmitOutcome.EXISTS
        Logger.error(
            f"error creating {what} ({response.status_code}): {response.text}"
        )
        return SubmitOutcome.FAILED
