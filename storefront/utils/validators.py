"""
Security and validation utilities.
"""

import secrets
from typing import Optional
from storefront.config import Config


def validate_revalidation_secret(provided_secret: Optional[str]) -> bool:
    """
    Validate the Ecwid webhook secret using constant-time comparison.

    secrets.compare_digest() always compares the entire string, so response
    time does not reveal how many leading characters matched.

    Args:
        provided_secret: Value of the X-Ecwid-Revalidation-Secret header

    Returns:
        True if valid, False otherwise
    """
    if not provided_secret or not Config.ECWID_REVALIDATION_SECRET:
        return False

    return secrets.compare_digest(provided_secret, Config.ECWID_REVALIDATION_SECRET)
