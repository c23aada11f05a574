#!/usr/bin/env python3
"""Command line argument parsing and configuration building."""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional, Sequence

from config import (REQUIRED_PARAMETERS, Config, GiteaConfig, GitHubConfig,
                    MirrorConfig, Mode, Visibility)
from logging_utils import Logger
from security import SecurityValidator
from utils import normalize_repo_reference

# Exit codes
EXIT_AUTH_ERROR = 40
EXIT_MISSING_ARGUMENTS = 2

DEFAULT_GITHUB_API = "https://api.github.com"


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Mirror GitHub repositories into a Gitea instance via API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  GITEA_URL      Gitea base URL (no trailing slash needed)
  ACCESS_TOKEN   Gitea API token
  GITHUB_TOKEN   GitHub personal access token

Examples:
  %(prog)s --mode org --org acme --visibility private
  %(prog)s --mode star --org starred --user octocat
  %(prog)s --mode repo --repo https://github.com/acme/widgets.git --user octocat
  %(prog)s --mode user --user octocat --exclude dotfiles --dry-run
        """,
    )
    return parser


def _add_mode_arguments(parser: argparse.ArgumentParser) -> None:
    """Add run mode arguments to parser."""
    parser.add_argument(
        "-m",
        "--mode",
        dest="mode",
        choices=[mode.value for mode in Mode],
        help="Mode to use: mirror an organization, starred repos, one repo "
        "or a user's repos",
    )
    parser.add_argument(
        "-o",
        "--org",
        dest="org",
        help="GitHub organization to mirror and/or the target organization in Gitea",
    )
    parser.add_argument(
        "-u",
        "--user",
        dest="user",
        help="GitHub user to gather the repositories from",
    )
    parser.add_argument(
        "-v",
        "--visibility",
        dest="visibility",
        choices=[visibility.value for visibility in Visibility],
        help="Visibility for the created Gitea organization",
    )
    parser.add_argument(
        "-r",
        "--repo",
        dest="repo",
        help="GitHub URL of a single repo to create a mirror for",
    )


def _add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    """Add host and credential arguments to parser."""
    parser.add_argument(
        "--gitea-url",
        dest="gitea_url",
        help="Base URL of the Gitea instance (or set GITEA_URL env var)",
    )
    parser.add_argument(
        "--gitea-token",
        dest="gitea_token",
        help="Gitea API token (or set ACCESS_TOKEN env var)",
    )
    parser.add_argument(
        "--gh-api",
        dest="gh_api_url",
        default=DEFAULT_GITHUB_API,
        help="Base URL of the GitHub API",
    )
    parser.add_argument(
        "--gh-token",
        dest="gh_token",
        help="GitHub API token (or set GITHUB_TOKEN env var)",
    )


def _add_behavior_arguments(parser: argparse.ArgumentParser) -> None:
    """Add behavior arguments to parser."""
    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        dest="dry_run",
        help="List actions without doing them",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        dest="exclude",
        help="Skip source repositories whose name contains this pattern",
    )
    parser.add_argument(
        "--timeout",
        dest="timeout_s",
        type=float,
        default=30.0,
        help="Seconds to wait for each Gitea API request (default: 30)",
    )


def missing_parameters(args: argparse.Namespace) -> List[str]:
    """Return the parameters the selected mode needs but did not get."""
    mode = Mode(args.mode)
    return [name for name in REQUIRED_PARAMETERS[mode] if not getattr(args, name)]


def _check_required_parameters(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> None:
    """Refuse to start when the mode's parameter set is incomplete."""
    if not args.mode:
        Logger.error("mode is not set")
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_MISSING_ARGUMENTS)

    missing = missing_parameters(args)
    if missing:
        flags = ", ".join(f"--{name}" for name in missing)
        Logger.error(f"mode '{args.mode}' requires: {flags}")
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_MISSING_ARGUMENTS)
    Logger.debug(f"required parameters are set for mode {args.mode}")


def _validate_parsed_arguments(args: argparse.Namespace, gitea_url: str) -> None:
    """Validate parsed arguments for security."""
    try:
        SecurityValidator.validate_url(gitea_url, ["https", "http"])
        SecurityValidator.validate_url(args.gh_api_url, ["https"])

        if args.org:
            SecurityValidator.validate_name(args.org, "Organization")
        if args.user:
            SecurityValidator.validate_name(args.user, "Username")
        if args.repo:
            normalize_repo_reference(args.repo)

        if args.timeout_s <= 0 or args.timeout_s > 600:
            raise ValueError("timeout must be between 0 and 600 seconds")

        if args.exclude and len(args.exclude) > 100:
            raise ValueError("exclude pattern too long (max 100 characters)")

        Logger.security_event(
            "CONFIG_VALIDATION", "successfully validated all configuration inputs"
        )
    except ValueError as e:
        Logger.security_event(
            "CONFIG_VALIDATION_FAILED", f"configuration validation failed: {e}"
        )
        Logger.error(f"configuration validation error: {e}")
        sys.exit(EXIT_MISSING_ARGUMENTS)


def _get_gitea_url(args: argparse.Namespace) -> str:
    gitea_url = args.gitea_url or os.getenv("GITEA_URL")
    if not gitea_url:
        Logger.error(
            "error: gitea URL not provided (use --gitea-url or GITEA_URL)"
        )
        sys.exit(EXIT_AUTH_ERROR)
    return gitea_url.rstrip("/")


def _get_tokens(args: argparse.Namespace) -> tuple:
    """Get authentication tokens from arguments or environment."""
    gitea_token = args.gitea_token or os.getenv("ACCESS_TOKEN")
    gh_token = args.gh_token or os.getenv("GITHUB_TOKEN")
    if not gitea_token:
        Logger.error(
            "error: gitea access token not provided (use --gitea-token or ACCESS_TOKEN)"
        )
        sys.exit(EXIT_AUTH_ERROR)
    if not gh_token:
        Logger.error(
            "error: github token not provided (use --gh-token or GITHUB_TOKEN)"
        )
        sys.exit(EXIT_AUTH_ERROR)
    return gitea_token, gh_token


def parse_arguments(argv: Optional[Sequence[str]] = None) -> Config:
    """Parse command line arguments and return configuration object."""
    parser = _create_argument_parser()
    _add_mode_arguments(parser)
    _add_connection_arguments(parser)
    _add_behavior_arguments(parser)

    args = parser.parse_args(argv)

    _check_required_parameters(parser, args)
    gitea_url = _get_gitea_url(args)
    _validate_parsed_arguments(args, gitea_url)
    gitea_token, gh_token = _get_tokens(args)

    mode = Mode(args.mode)
    if mode == Mode.ORG and not args.user:
        Logger.warn(
            "warning: --user not set; private repos are mirrored with "
            "token-only credentials"
        )

    return Config(
        gitea=GiteaConfig(
            url=gitea_url,
            token=gitea_token,
            timeout_s=float(args.timeout_s),
        ),
        github=GitHubConfig(
            api_url=args.gh_api_url.rstrip("/"),
            token=gh_token,
            username=args.user,
        ),
        mirror=MirrorConfig(
            mode=mode,
            org=args.org,
            visibility=Visibility(args.visibility) if args.visibility else None,
            repo=args.repo,
            exclude=args.exclude,
            dry_run=args.dry_run,
        ),
    )
