"""
Pooled GitHub API session shared by every repository evaluation.

Worker threads share one ``httpx.Client``. It carries the API base URL and the
authentication headers, and is rebuilt only when one of those settings (or
SSL verification) changes.
"""

import threading

import httpx

from repo_compliance.config import get_verify_ssl

GITHUB_REST_API = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"

_lock = threading.Lock()
_http_client: httpx.Client | None = None
_http_client_key: tuple | None = None


def _github_headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
    }


def get_github_client(
    token: str,
    api_url: str = GITHUB_REST_API,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Get or create the shared GitHub session.

    Args:
        token: Token sent as a Bearer credential
        api_url: REST API base URL requests are relative to
        transport: Custom transport (``httpx.MockTransport`` in tests)
    """
    global _http_client, _http_client_key
    key = (token, api_url, get_verify_ssl(), id(transport))

    with _lock:
        if (
            _http_client is not None
            and not _http_client.is_closed
            and _http_client_key == key
        ):
            return _http_client

        if _http_client is not None and not _http_client.is_closed:
            _http_client.close()

        _http_client = httpx.Client(
            base_url=api_url,
            headers=_github_headers(token),
            verify=key[2],
            transport=transport,
            timeout=30,
            follow_redirects=True,
            limits=httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10,
                keepalive_expiry=30.0,
            ),
        )
        _http_client_key = key
        return _http_client


def close_http_client():
    """Close the shared session. Call this when shutting down."""
    global _http_client, _http_client_key
    with _lock:
        if _http_client is not None and not _http_client.is_closed:
            _http_client.close()
        _http_client = None
        _http_client_key = None
