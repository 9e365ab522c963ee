"""Content fingerprint manifests with drift verification."""

__version__ = "1.0.0"
