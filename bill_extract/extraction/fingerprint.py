"""Content fingerprints used as cache keys for uploaded images."""

import hashlib


def compute_fingerprint(raw_bytes: bytes) -> str:
    """SHA-256 hex digest of the raw upload bytes."""
    return hashlib.sha256(raw_bytes).hexdigest()
