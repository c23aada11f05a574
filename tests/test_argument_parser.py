"""Tests for command line parsing and per-mode parameter checks."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from argument_parser import parse_arguments
from config import Mode, Visibility

BASE_ARGS = [
    '--gitea-url', 'https://gitea.example.com/',
    '--gitea-token', 'gitea-token',
    '--gh-token', 'gh-token',
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in ('GITEA_URL', 'ACCESS_TOKEN', 'GITHUB_TOKEN'):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.parametrize(
    'argv',
    [
        ['--mode', 'org', '--org', 'acme'],
        ['--mode', 'org', '--visibility', 'private'],
        ['--mode', 'star', '--org', 'acme'],
        ['--mode', 'star', '--user', 'octocat'],
        ['--mode', 'repo', '--user', 'octocat'],
        ['--mode', 'repo', '--repo', 'https://github.com/acme/widgets'],
        ['--mode', 'user'],
        ['--org', 'acme'],
    ],
)
@patch('requests.post')
@patch('requests.get')
def test_missing_required_parameter_exits_before_network(
    mock_get: MagicMock, mock_post: MagicMock, argv
) -> None:
    with pytest.raises(SystemExit) as exc_info:
        parse_arguments(argv + BASE_ARGS)

    assert exc_info.value.code == 2
    mock_get.assert_not_called()
    mock_post.assert_not_called()


def test_org_mode_config() -> None:
    cfg = parse_arguments(
        ['-m', 'org', '-o', 'acme', '-v', 'private', '-u', 'octocat'] + BASE_ARGS
    )

    assert cfg.mirror.mode == Mode.ORG
    assert cfg.mirror.org == 'acme'
    assert cfg.mirror.visibility == Visibility.PRIVATE
    assert cfg.gitea.url == 'https://gitea.example.com'
    assert cfg.github.username == 'octocat'
    assert cfg.github.api_url == 'https://api.github.com'
    assert cfg.mirror.dry_run is False


def test_credentials_read_from_environment(monkeypatch) -> None:
    monkeypatch.setenv('GITEA_URL', 'http://gitea:3000')
    monkeypatch.setenv('ACCESS_TOKEN', 'env-gitea')
    monkeypatch.setenv('GITHUB_TOKEN', 'env-github')

    cfg = parse_arguments(['--mode', 'user', '--user', 'octocat'])

    assert cfg.gitea.url == 'http://gitea:3000'
    assert cfg.gitea.token == 'env-gitea'
    assert cfg.github.token == 'env-github'


def test_missing_tokens_exit_with_auth_code() -> None:
    with pytest.raises(SystemExit) as exc_info:
        parse_arguments(
            ['--mode', 'user', '--user', 'octocat', '--gitea-url', 'https://gitea.example.com']
        )

    assert exc_info.value.code == 40


def test_invalid_repo_reference_rejected() -> None:
    with pytest.raises(SystemExit) as exc_info:
        parse_arguments(
            ['--mode', 'repo', '--user', 'octocat', '--repo', 'https://github.com/acme'] + BASE_ARGS
        )

    assert exc_info.value.code == 2


def test_invalid_visibility_rejected_by_argparse() -> None:
    with pytest.raises(SystemExit) as exc_info:
        parse_arguments(['--mode', 'org', '--org', 'acme', '--visibility', 'internal'] + BASE_ARGS)

    assert exc_info.value.code == 2
