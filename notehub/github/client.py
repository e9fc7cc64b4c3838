"""Sets up the authenticated githubkit client."""

from githubkit import GitHub
from githubkit.auth import TokenAuthStrategy

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_REQUEST_TIMEOUT = 30.0


async def get_github_client(
    github_pat_token: str,
    github_api_url: str = DEFAULT_GITHUB_API_URL,
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> GitHub[TokenAuthStrategy]:
    """Returns a GitHub client authenticated with a personal access token.

    Every request made through the client is bounded by request_timeout seconds.
    """
    if not github_pat_token:
        raise RuntimeError("GitHub PAT authentication requires a github_pat_token.")
    # Disable HTTP caching to always get fresh data
    return GitHub(
        auth=TokenAuthStrategy(github_pat_token),
        base_url=github_api_url,
        http_cache=False,
        timeout=request_timeout,
    )
