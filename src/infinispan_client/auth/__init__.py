"""
Auth handlers for infinispan_client.
"""
from .digest import UNUSABLE_CHALLENGE_ERRORS, DigestAuth

__all__ = [
    "DigestAuth",
    "UNUSABLE_CHALLENGE_ERRORS",
]
