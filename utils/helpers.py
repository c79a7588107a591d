"""
Utility functions and helpers for the brand awareness service.

Run identifiers, input normalisation and log-friendly text shortening.
"""

import uuid
from typing import Optional


def generate_run_id() -> str:
    """
    Generate a unique scan run identifier.

    Every brand awareness run gets one; it keys the persisted report, the
    cost records and every log line of the run.

    Returns:
        str: Run ID in UUID4 format

    Example:
        >>> run_id = generate_run_id()
        >>> len(run_id)
        36
    """
    return str(uuid.uuid4())


def sanitize_business_name(business_name: Optional[str]) -> Optional[str]:
    """
    Collapse whitespace in a business name.

    Returns None for missing or blank names so callers fall back to the
    domain.

    Example:
        >>> sanitize_business_name("  Acme   Plumbing ")
        'Acme Plumbing'
        >>> sanitize_business_name("   ") is None
        True
    """
    if not business_name:
        return None
    cleaned = " ".join(business_name.strip().split())
    return cleaned or None


def normalize_domain(url: str) -> str:
    """
    Reduce a URL or bare domain to its host name.

    Args:
        url: "https://www.acme.com/about", "acme.com", ...

    Returns:
        str: Lowercase host without protocol, www. prefix, path or query

    Example:
        >>> normalize_domain("https://www.Acme.com/about?x=1")
        'acme.com'
        >>> normalize_domain("acme.com")
        'acme.com'
    """
    domain = url.strip().replace("https://", "").replace("http://", "")

    if domain.lower().startswith("www."):
        domain = domain[4:]

    domain = domain.split("/")[0].split("?")[0]

    return domain.lower()


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """Truncate text to max_length, appending suffix when cut."""
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
