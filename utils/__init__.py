# Utilities package

from .helpers import (
    generate_run_id,
    sanitize_business_name,
    normalize_domain,
    truncate_text
)

__all__ = [
    "generate_run_id",
    "sanitize_business_name",
    "normalize_domain",
    "truncate_text"
]
