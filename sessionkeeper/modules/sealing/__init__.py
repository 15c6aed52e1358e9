"""
Sealing Module - Black Box Interface

Purpose: Make session cookies tamper-evident and opaque
Interface: seal(), open()
Hidden: Key derivation, Fernet token format, name binding

Replaceable with any implementation of the Sealer protocol.
"""

from .sealer import FernetSealer, SealError, Sealer, seal_age

__all__ = ["FernetSealer", "SealError", "Sealer", "seal_age"]
