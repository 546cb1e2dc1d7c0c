"""devsetup — developer environment bootstrap."""

__version__ = "0.1.0"
