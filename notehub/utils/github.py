"""Contains utility functions for GitHub interactions."""

import re
from urllib.parse import parse_qs, urlsplit

NEXT_LINK_PATTERN = re.compile(r'<(?P<url>[^>]+)>\s*;\s*rel="next"')


def split_repository(repo: str | None) -> tuple[str, str]:
    """Splits a repository identifier into owner and repository name."""
    if repo is None:
        raise ValueError("A repository in the form 'owner/name' is required.")
    repo = repo.strip().strip("/")
    parts = [part.strip() for part in repo.split("/")]
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/name' with no extra parts.")
    owner, repository = parts
    return owner, repository


def normalize_repository(repo: str | None) -> str:
    """Returns the canonical 'owner/name' form of a repository identifier."""
    owner, repository = split_repository(repo)
    return f"{owner}/{repository}"


def parse_next_page(link_header: str | None) -> int | None:
    """Extracts the page number of the rel="next" entry of a GitHub Link header.

    GitHub advertises continuation pages through the Link response header, e.g.
    ``<https://api.github.com/repositories/1/issues?page=2>; rel="next", <...>; rel="last"``.
    Returns None when the header is absent or has no next entry, which marks the
    final page of a listing.
    """
    if not link_header:
        return None
    for entry in link_header.split(","):
        match = NEXT_LINK_PATTERN.search(entry)
        if match is None:
            continue
        page_values = parse_qs(urlsplit(match.group("url")).query).get("page")
        if not page_values:
            return None
        try:
            return int(page_values[0])
        except ValueError:
            return None
    return None
