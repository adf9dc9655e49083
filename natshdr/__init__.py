"""Parse, build and serialise NATS message header blocks."""

__version__ = "0.1.0"
__all__ = ["headers"]