"""URL building utilities for URL shortener."""

from typing import Tuple
from urllib.parse import urlsplit


def build_base_url(protocol: str, host: str, path_prefix: str = "") -> str:
    """Build the server base URL used in public links.

    Args:
        protocol: Scheme, with or without trailing ``://`` (e.g. https)
        host: Host with optional port (e.g. sho.rt or localhost:9200)
        path_prefix: Optional path prefix (e.g. /s)

    Returns:
        Base URL without trailing slash
    """
    scheme = protocol.split(":", 1)[0]
    base = f"{scheme}://{host.strip('/')}"
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}"
    return base


def build_short_url(hash: str, base_url: str) -> str:
    """Build complete short URL.

    Args:
        hash: The hash
        base_url: Base URL (e.g., https://example.com)

    Returns:
        Complete short URL
    """
    return f"{base_url.rstrip('/')}/{hash}"


def build_remove_url(hash: str, remove_token: str, base_url: str) -> str:
    """Build the link that removes a short URL."""
    return f"{build_short_url(hash, base_url)}/remove/{remove_token}"


def split_url(url: str) -> Tuple[str, str, str]:
    """Split a URL into the protocol, domain and path stored for metrics.

    ``protocol`` keeps the trailing colon (``http:``), ``domain`` is the full
    network location and ``path`` carries the query and fragment. Missing
    parts are empty strings.
    """
    parts = urlsplit(url)

    protocol = f"{parts.scheme}:" if parts.scheme else ""
    domain = parts.netloc
    path = parts.path
    if parts.query:
        path += f"?{parts.query}"
    if parts.fragment:
        path += f"#{parts.fragment}"

    return protocol, domain, path
