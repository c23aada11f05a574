"""Tests for GitHubSource listing and pagination."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import github
import pytest

from github_source import GitHubSource, RepositoryListing


def _gh_repo(name: str, visibility: str = 'public') -> SimpleNamespace:
    return SimpleNamespace(
        name=name,
        clone_url=f'https://github.com/acme/{name}.git',
        description=f'{name} description',
        visibility=visibility,
        private=visibility == 'private',
    )


def _paginated(*pages) -> MagicMock:
    paginated = MagicMock()
    paginated.get_page.side_effect = list(pages)
    return paginated


def _source() -> GitHubSource:
    source = GitHubSource('https://api.github.com', 'gh-token')
    source.api = MagicMock()
    return source


def test_pagination_stops_at_first_empty_page() -> None:
    """Pages are requested in order until one returns no items."""
    source = _source()
    paginated = _paginated(
        [_gh_repo('a'), _gh_repo('b')],
        [_gh_repo('c')],
        [],
        [_gh_repo('never')],
    )
    source.api.get_organization.return_value.get_repos.return_value = paginated

    listing = RepositoryListing()
    source.fetch_org_repos('acme', listing)

    assert [repo.name for repo in listing] == ['a', 'b', 'c']
    assert len(listing) == 3
    assert listing.page_count == 2
    assert [c.args[0] for c in paginated.get_page.call_args_list] == [0, 1, 2]
    source.api.get_organization.assert_called_once_with('acme')


def test_empty_first_page_yields_empty_listing() -> None:
    source = _source()
    source.api.get_user.return_value.get_starred.return_value = _paginated([])

    listing = RepositoryListing()
    source.fetch_starred_repos('octocat', listing)

    assert len(listing) == 0
    source.api.get_user.assert_called_once_with('octocat')


def test_user_repos_are_owner_affiliated() -> None:
    source = _source()
    authenticated = source.api.get_user.return_value
    authenticated.get_repos.return_value = _paginated([_gh_repo('dotfiles', 'private')], [])

    listing = RepositoryListing()
    source.fetch_user_repos('octocat', listing)

    authenticated.get_repos.assert_called_once_with(affiliation='owner')
    assert [repo.visibility for repo in listing] == ['private']


def test_fetch_repo_normalizes_url() -> None:
    """A full clone URL is reduced to owner/name before the lookup."""
    source = _source()
    source.api.get_repo.return_value = _gh_repo('widgets')

    listing = RepositoryListing()
    source.fetch_repo('https://github.com/acme/widgets.git', listing)

    source.api.get_repo.assert_called_once_with('acme/widgets')
    assert [repo.name for repo in listing] == ['widgets']


def test_listing_failure_is_fatal() -> None:
    source = _source()
    source.api.get_organization.side_effect = github.GithubException(
        404, {'message': 'Not Found'}, None
    )

    with pytest.raises(SystemExit) as exc_info:
        source.fetch_org_repos('missing', RepositoryListing())

    assert exc_info.value.code == 30


def test_failure_on_later_page_is_fatal() -> None:
    source = _source()
    paginated = MagicMock()
    paginated.get_page.side_effect = [
        [_gh_repo('a')],
        github.GithubException(502, {'message': 'Bad Gateway'}, None),
    ]
    source.api.get_organization.return_value.get_repos.return_value = paginated

    with pytest.raises(SystemExit) as exc_info:
        source.fetch_org_repos('acme', RepositoryListing())

    assert exc_info.value.code == 30


def test_bad_credentials_map_to_auth_exit_code() -> None:
    source = _source()
    source.api.get_user.side_effect = github.BadCredentialsException(
        401, {'message': 'Bad credentials'}, None
    )

    with pytest.raises(SystemExit) as exc_info:
        source.fetch_starred_repos('octocat', RepositoryListing())

    assert exc_info.value.code == 40


def test_listing_released_on_exit_even_after_error() -> None:
    listing = RepositoryListing()
    with pytest.raises(RuntimeError):
        with listing:
            listing.add_page([SimpleNamespace(name='a')])
            raise RuntimeError('boom')

    assert listing.released is True
    assert len(listing) == 0
    with pytest.raises(RuntimeError):
        listing.add_page([])


@patch('github_source.github.Github')
def test_connect_public_api_pages_by_100_without_retries(mock_github: MagicMock) -> None:
    """Reads are not retried, so a failing page aborts on the first error."""
    source = GitHubSource('https://api.github.com/', 'gh-token')

    source.connect()

    kwargs = mock_github.call_args.kwargs
    assert kwargs['per_page'] == 100
    assert kwargs['retry'] is None
    assert 'base_url' not in kwargs
    assert source.api is mock_github.return_value


@patch('github_source.github.Github')
def test_connect_enterprise_api_uses_base_url(mock_github: MagicMock) -> None:
    source = GitHubSource('https://github.acme.com/api/v3', 'gh-token')

    source.connect()

    kwargs = mock_github.call_args.kwargs
    assert kwargs['base_url'] == 'https://github.acme.com/api/v3'
    assert kwargs['per_page'] == 100
    assert kwargs['retry'] is None


class _LazyRepo:
    """Repository whose visibility needs a second request that fails."""

    name = 'widgets'
    clone_url = 'https://github.com/acme/widgets.git'
    description = None

    @property
    def visibility(self) -> str:
        raise github.GithubException(502, {'message': 'Bad Gateway'}, None)


def test_fetch_repo_attribute_failure_is_source_error() -> None:
    source = _source()
    source.api.get_repo.return_value = _LazyRepo()
    listing = RepositoryListing()

    with pytest.raises(SystemExit) as exc_info:
        source.fetch_repo('acme/widgets', listing)

    assert exc_info.value.code == 30
    assert len(listing) == 0
