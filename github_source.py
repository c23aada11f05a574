#!/usr/bin/env python3
"""GitHub API wrapper for listing the repositories to mirror."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Iterator, List, NoReturn, Optional

import github
import requests

if TYPE_CHECKING:
    from github.PaginatedList import PaginatedList

from logging_utils import Logger
from migration_builder import SourceRepository
from utils import normalize_repo_reference

# Exit codes
EXIT_AUTH_ERROR = 40
EXIT_GITHUB_ERROR = 30

DEFAULT_API_URL = "https://api.github.com"
PAGE_SIZE = 100


class RepositoryListing:
    """In-memory buffer of fetched repository pages, in page order.

    Used as a context manager so the buffer is released on every exit path.
    """

    def __init__(self) -> None:
        self._pages: List[List[SourceRepository]] = []
        self.released = False

    def __enter__(self) -> "RepositoryListing":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def add_page(self, repos: List[SourceRepository]) -> None:
        if self.released:
            raise RuntimeError("repository listing already released")
        self._pages.append(list(repos))

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def release(self) -> None:
        self._pages.clear()
        self.released = True

    def __iter__(self) -> Iterator[SourceRepository]:
        for page in self._pages:
            yield from page

    def __len__(self) -> int:
        return sum(len(page) for page in self._pages)


class GitHubSource:
    """Wrapper around GitHub API to enumerate repositories."""

    def __init__(self, api_url: str, token: str) -> None:
        self.api_url = api_url.rstrip("/")
        self.token = token
        self.api: Optional[github.Github] = None

    def connect(self) -> None:
        """Build the client; reads fail on the first error instead of retrying."""
        Logger.info(f"init github API: {self.api_url}")
        auth = github.Auth.Token(self.token)
        if self.api_url != DEFAULT_API_URL:
            self.api = github.Github(
                base_url=self.api_url, auth=auth, per_page=PAGE_SIZE, retry=None
            )
        else:
            self.api = github.Github(auth=auth, per_page=PAGE_SIZE, retry=None)

    def _require_api(self) -> github.Github:
        if self.api is None:
            Logger.error("github API not initialized")
            sys.exit(EXIT_GITHUB_ERROR)
        return self.api

    def fetch_org_repos(self, org: str, listing: RepositoryListing) -> None:
        api = self._require_api()
        Logger.info(f"fetching organization repos for {org}")
        try:
            organization = api.get_organization(org)
            self._collect_pages(organization.get_repos(), "organization repos", listing)
        except (github.GithubException, requests.RequestException) as e:
            self._fail(f"failed to list repos of organization '{org}'", e)

    def fetch_starred_repos(self, user: str, listing: RepositoryListing) -> None:
        api = self._require_api()
        Logger.info(f"fetching starred repos for user {user}")
        try:
            named_user = api.get_user(user)
            self._collect_pages(named_user.get_starred(), "starred repos", listing)
        except (github.GithubException, requests.RequestException) as e:
            self._fail(f"failed to list starred repos of '{user}'", e)

    def fetch_user_repos(self, user: str, listing: RepositoryListing) -> None:
        """List repositories owned by the token's user (``/user/repos``)."""
        api = self._require_api()
        Logger.info(f"fetching user repos for {user}")
        try:
            authenticated = api.get_user()
            self._collect_pages(
                authenticated.get_repos(affiliation="owner"), "user repos", listing
            )
        except (github.GithubException, requests.RequestException) as e:
            self._fail(f"failed to list repos of user '{user}'", e)

    def fetch_repo(self, reference: str, listing: RepositoryListing) -> None:
        api = self._require_api()
        Logger.info(f"fetching single repo {reference}")
        try:
            owner, name = normalize_repo_reference(reference)
        except ValueError as e:
            Logger.error(f"invalid repository reference: {e}")
            sys.exit(EXIT_GITHUB_ERROR)

        try:
            repo = SourceRepository.from_github(api.get_repo(f"{owner}/{name}"))
        except (github.GithubException, requests.RequestException) as e:
            self._fail(f"failed to fetch repo '{owner}/{name}'", e)
        listing.add_page([repo])
        Logger.info(f"fetched single repo {owner}/{name}")

    def _collect_pages(
        self, paginated: "PaginatedList", label: str, listing: RepositoryListing
    ) -> None:
        """Fetch 1-indexed pages until one comes back empty."""
        page_number = 1
        while True:
            Logger.debug(f"fetching {label} page {page_number}")
            page = paginated.get_page(page_number - 1)
            if len(page) == 0:
                break
            listing.add_page([SourceRepository.from_github(repo) for repo in page])
            Logger.info(f"fetched {label} page {page_number} ({len(page)} repos)")
            page_number += 1
        Logger.info(f"found {len(listing)} repos to mirror")

    @staticmethod
    def _fail(message: str, error: Exception) -> NoReturn:
        if isinstance(error, github.BadCredentialsException):
            Logger.error("authentication failed (github): invalid token")
            sys.exit(EXIT_AUTH_ERROR)
        Logger.error(f"{message}: {error}")
        sys.exit(EXIT_GITHUB_ERROR)
