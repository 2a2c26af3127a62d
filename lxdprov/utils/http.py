"""HTTP session utilities for the provisioning client."""

from typing import Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


def create_session(
    pool_connections: int = 10,
    pool_maxsize: int = 10,
    retry_total: int = 0,
    retry_backoff_factor: float = 0.5,
    retry_status_forcelist: tuple = (502, 503, 504),
    verify: bool = True,
    cert: Optional[Tuple[str, str]] = None,
) -> requests.Session:
    """Create a requests Session with connection pooling and retry strategy.

    Lifecycle calls are not retried by default: a suspend or create that
    times out may still have been applied by the remote side, so the caller
    decides whether to resend.

    Args:
        pool_connections: Number of connection pools to cache (default: 10).
        pool_maxsize: Maximum connections per pool (default: 10).
        retry_total: Maximum number of retries (default: 0).
        retry_backoff_factor: Backoff factor for retries (default: 0.5).
        retry_status_forcelist: HTTP status codes to retry on (default: 502, 503, 504).
        verify: Verify the server TLS certificate (default: True).
        cert: Optional (certificate, key) file pair for TLS client authentication.

    Returns:
        A configured requests.Session object with connection pooling and retry strategy.
    """
    session = requests.Session()

    retry_strategy = Retry(
        total=retry_total,
        # read=False re-raises read timeouts as-is instead of wrapping them in MaxRetryError
        read=retry_total if retry_total else False,
        backoff_factor=retry_backoff_factor,
        status_forcelist=retry_status_forcelist,
        raise_on_status=False,
    )

    adapter = HTTPAdapter(
        pool_connections=pool_connections,
        pool_maxsize=pool_maxsize,
        max_retries=retry_strategy,
    )

    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.verify = verify
    if cert:
        session.cert = cert

    return session
