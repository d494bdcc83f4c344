"""Wire protocol, peer registry, routing, pairing gate and file transfer for a phone–desktop link."""

__version__ = "0.1.0"