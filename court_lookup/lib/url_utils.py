"""URL helpers for document links found on court pages."""

from urllib.parse import urljoin, urlparse


def origin_of(url: str) -> str:
    """Return `scheme://host[:port]` for `url`, or `url` itself if it has no host."""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return url.rstrip("/")
    return f"{parsed.scheme}://{parsed.netloc}"


def is_absolute_url(href: str) -> bool:
    """Check if `href` already carries an http(s) scheme.

    Args:
        href: Link as written in the page

    Returns:
        bool: True for http/https links
    """
    return urlparse(href).scheme in ("http", "https")


def resolve_document_url(href: str, base_origin: str) -> str:
    """Make a document link absolute against the site's origin.

    Absolute http(s) links are returned unchanged. Anything else,
    including links without a leading slash, is placed under
    `base_origin`.
    """
    href = (href or "").strip()
    if not href:
        return ""
    if is_absolute_url(href):
        return href
    if href.startswith("//"):
        scheme = urlparse(base_origin).scheme or "https"
        return f"{scheme}:{href}"
    return urljoin(origin_of(base_origin) + "/", href.lstrip("/"))
