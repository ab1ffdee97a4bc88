"""ID generators for resources, subscriptions, and scratch files."""

import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Used as the opaque primary key of resources, buckets, and webhook rows.

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_scratch_name(prefix: str = "upload-") -> str:
    """Return a random file name for an in-progress upload (not guessable)."""
    return f"{prefix}{secrets.token_hex(16)}"
