#!/usr/bin/env python3
"""Main orchestrator for mirroring GitHub repositories into Gitea."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from config import Config, Mode
from gitea_target import GiteaTarget, SubmitOutcome
from github_source import GitHubSource, RepositoryListing
from logging_utils import Logger
from migration_builder import SourceCredentials, build_migration_request

# Exit codes
EXIT_SUCCESS = 0
EXIT_EXECUTION_ERROR = 1
EXIT_MIGRATION_ERROR = 32

# GitHub accepts any username alongside a token
TOKEN_ONLY_USERNAME = "x-access-token"


@dataclass
class RunSummary:
    """Per-run tally of migration outcomes."""
    created: int = 0
    existing: int = 0
    failed: int = 0
    excluded: int = 0

    def record(self, outcome: SubmitOutcome) -> None:
        if outcome == SubmitOutcome.CREATED:
            self.created += 1
        elif outcome == SubmitOutcome.EXISTS:
            self.existing += 1
        else:
            self.failed += 1


class MirrorOrchestrator:
    def __init__(self, cfg: Config) -> None:
        self.cfg = cfg
        self.gh = GitHubSource(cfg.github.api_url, cfg.github.token)
        self.gitea = GiteaTarget(cfg.gitea)
        self.summary = RunSummary()

    def run(self) -> int:
        mode = self.cfg.mirror.mode
        Logger.info(f"starting mirror run with mode {mode.value}")
        try:
            self.gh.connect()
            self.gitea.connect()

            with RepositoryListing() as listing:
                if mode == Mode.ORG:
                    self._run_org(listing)
                elif mode == Mode.STAR:
                    self._run_star(listing)
                elif mode == Mode.USER:
                    self._run_user(listing)
                else:
                    self._run_repo(listing)

            return self._finish()
        except SystemExit as e:
            return int(e.code) if isinstance(e.code, int) else EXIT_EXECUTION_ERROR
        except Exception as e:
            Logger.error(f"unexpected error: {e}")
            return EXIT_EXECUTION_ERROR

    def _run_org(self, listing: RepositoryListing) -> None:
        org = self.cfg.mirror.org
        if self.cfg.mirror.dry_run:
            Logger.info(f"would create organization: {org}")
        else:
            outcome = self.gitea.create_org(org, self.cfg.mirror.visibility)
            if outcome == SubmitOutcome.FAILED:
                self.summary.failed += 1
        uid = self.gitea.get_org_id(org)
        self.gh.fetch_org_repos(org, listing)
        self._submit_all(listing, uid)

    def _run_star(self, listing: RepositoryListing) -> None:
        uid = self.gitea.get_org_id(self.cfg.mirror.org)
        self.gh.fetch_starred_repos(self.cfg.github.username, listing)
        self._submit_all(listing, uid)

    def _run_user(self, listing: RepositoryListing) -> None:
        user = self.cfg.github.username
        uid = self.gitea.get_user_id(user)
        self.gh.fetch_user_repos(user, listing)
        self._submit_all(listing, uid)

    def _run_repo(self, listing: RepositoryListing) -> None:
        self.gh.fetch_repo(self.cfg.mirror.repo, listing)
        # Single repository mode addresses the owner by name, not id
        self._submit_all(listing, self.cfg.github.username)

    def _submit_all(self, listing: RepositoryListing, owner: Union[int, str]) -> None:
        credentials = SourceCredentials(
            username=self.cfg.github.username or TOKEN_ONLY_USERNAME,
            token=self.cfg.github.token,
        )
        exclude = self.cfg.mirror.exclude
        total = len(listing)
        Logger.info(f"starting migration of {total} repos")
        for idx, repo in enumerate(listing, start=1):
            if exclude and exclude in repo.name:
                Logger.warn(f"[{idx}/{total}] excluding: {repo.name}")
                self.summary.excluded += 1
                continue

            request = build_migration_request(repo, owner, credentials)
            if self.cfg.mirror.dry_run:
                Logger.info(
                    f"[{idx}/{total}] would mirror: {repo.clone_url} -> "
                    f"{repo.name} (private={request.private})"
                )
                continue

            Logger.info(f"[{idx}/{total}] mirror: {repo.clone_url}")
            self.summary.record(self.gitea.migrate_repo(request))

    def _finish(self) -> int:
        s = self.summary
        Logger.info(
            f"summary: {s.created} created, {s.existing} already existing, "
            f"{s.failed} failed, {s.excluded} excluded"
        )
        if s.failed:
            Logger.error(f"{s.failed} operation(s) failed")
            return EXIT_MIGRATION_ERROR
        if self.cfg.mirror.dry_run:
            Logger.info("dry-run completed")
        else:
            Logger.info("finished")
        return EXIT_SUCCESS
