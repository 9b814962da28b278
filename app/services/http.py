"""HTTP session helpers shared by the resolver, fetchers and gateway."""

import aiohttp

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def create_session(timeout: int) -> aiohttp.ClientSession:
    """Create configured aiohttp session.

    Sets up session with connection limits, a total timeout and browser-like
    headers so that link shorteners and track pages serve regular HTML.

    Args:
        timeout: Total request timeout in seconds.

    Returns:
        aiohttp.ClientSession: Configured HTTP session for making requests.
    """
    connector = aiohttp.TCPConnector(limit=20, limit_per_host=5)
    client_timeout = aiohttp.ClientTimeout(total=timeout)

    headers = {
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
    }

    return aiohttp.ClientSession(connector=connector, timeout=client_timeout, headers=headers)
