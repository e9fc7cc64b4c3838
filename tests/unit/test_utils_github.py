"""Unit tests for the GitHub utility functions."""

import pytest

from notehub.utils.github import normalize_repository, parse_next_page, split_repository


@pytest.mark.parametrize(
    "repo, expected",
    [
        ("acme/widgets", ("acme", "widgets")),
        ("/acme/widgets/", ("acme", "widgets")),
        ("  acme/widgets ", ("acme", "widgets")),
    ],
)
def test_split_repository_valid(repo: str, expected: tuple[str, str]) -> None:
    """Valid identifiers split into owner and name."""
    assert split_repository(repo) == expected


@pytest.mark.parametrize("repo", [None, "", "acme", "acme/", "/widgets", "acme/widgets/extra", "acme//widgets"])
def test_split_repository_invalid(repo: str | None) -> None:
    """Identifiers without exactly one owner and one name are rejected."""
    with pytest.raises(ValueError):
        split_repository(repo)


def test_normalize_repository() -> None:
    """Surrounding slashes and whitespace are dropped."""
    assert normalize_repository(" /acme/widgets/ ") == "acme/widgets"


@pytest.mark.parametrize(
    "link_header, expected",
    [
        (None, None),
        ("", None),
        (
            '<https://api.github.com/repositories/1/issues?per_page=50&page=2>; rel="next", '
            '<https://api.github.com/repositories/1/issues?per_page=50&page=5>; rel="last"',
            2,
        ),
        (
            '<https://api.github.com/repositories/1/issues?page=1>; rel="prev", '
            '<https://api.github.com/repositories/1/issues?page=3>; rel="next"',
            3,
        ),
        ('<https://api.github.com/repositories/1/issues?page=1>; rel="first"', None),
        ('<https://api.github.com/repositories/1/issues?per_page=50>; rel="next"', None),
        ('<https://api.github.com/repositories/1/issues?page=abc>; rel="next"', None),
    ],
)
def test_parse_next_page(link_header: str | None, expected: int | None) -> None:
    """The page number of the next link is the continuation token."""
    assert parse_next_page(link_header) == expected
