"""
Path and URL utilities for the site mirror.

Provides URL normalization, output path derivation, and directory management.
"""

import os
from urllib.parse import urlparse, urlunparse, urljoin, unquote

from .constants import PAGE_FILENAME


# Schemes that never point at a fetchable resource
UNFETCHABLE_SCHEMES = ('data:', 'javascript:', 'blob:', 'mailto:', 'tel:', 'about:')


def normalize_url(url: str) -> str:
    """
    Normalize a URL for visited-set membership.

    Lowercases the scheme and host and gives an empty path a single slash.
    Query and fragment are kept as they are.

    Args:
        url: Absolute URL to normalize

    Returns:
        Normalized URL string
    """
    parsed = urlparse(url.strip())
    return urlunparse((
        parsed.scheme.lower(),
        parsed.netloc.lower(),
        parsed.path or '/',
        parsed.params,
        parsed.query,
        parsed.fragment
    ))


def resolve_url(reference: str, base_url: str) -> str:
    """
    Resolve a possibly relative reference against a base URL.

    Args:
        reference: href/src value as found in markup
        base_url: URL the reference is relative to

    Returns:
        Absolute URL string
    """
    reference = reference.strip()
    if reference.startswith(('http://', 'https://')):
        return reference
    return urljoin(base_url, reference)


def is_fetchable(reference: str) -> bool:
    """Check that a markup reference is not an inline or script pseudo-URL."""
    return bool(reference) and not reference.strip().lower().startswith(UNFETCHABLE_SCHEMES)


def get_domain(url: str) -> str:
    """
    Extract the domain from a URL.

    Args:
        url: URL to extract domain from

    Returns:
        Domain string (e.g., 'example.com')
    """
    parsed = urlparse(url)
    return parsed.netloc.lower()


def get_url_path(url: str) -> str:
    """
    Get the decoded path component of a URL.

    Args:
        url: URL to extract path from

    Returns:
        Path string
    """
    return unquote(urlparse(url).path)


def is_within(path: str, root: str) -> bool:
    """
    Check that a path lies inside a root directory.

    Args:
        path: Candidate path
        root: Directory the path must stay under

    Returns:
        True if path is root itself or below it
    """
    root = os.path.abspath(root)
    path = os.path.abspath(path)
    return os.path.commonpath([root, path]) == root


def page_folder(url: str, output_dir: str) -> str:
    """
    Get the folder a page and its assets are written into.

    The folder mirrors the URL path under the output root, so
    ``https://example.com/en/home`` maps to ``<output_dir>/en/home``.

    Args:
        url: Page URL
        output_dir: Base output directory

    Returns:
        Local folder path
    """
    relative = get_url_path(url).strip('/')
    return os.path.normpath(os.path.join(output_dir, relative))


def page_output_path(url: str, output_dir: str) -> str:
    """
    Get the local file path for a page's rendered markup.

    Args:
        url: Page URL
        output_dir: Base output directory

    Returns:
        Local file path ending in ``index.html``
    """
    return os.path.join(page_folder(url, output_dir), PAGE_FILENAME)


def asset_filename(url: str) -> str:
    """
    Derive an asset's filename from the last segment of its URL path.

    Assets sharing a basename in one folder map to the same file.

    Args:
        url: Asset URL

    Returns:
        Filename, or an empty string when the path ends in a slash
    """
    return os.path.basename(get_url_path(url))


def ensure_dir(path: str) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists
    """
    os.makedirs(path, exist_ok=True)


def ensure_parent_dir(file_path: str) -> None:
    """
    Ensure the parent directory of a file exists.

    Args:
        file_path: File path whose parent directory should exist
    """
    parent = os.path.dirname(file_path)
    if parent:
        ensure_dir(parent)
