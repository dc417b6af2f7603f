"""textverify — check on-page text layers against an editorial memo."""

__version__ = "0.1.0"
