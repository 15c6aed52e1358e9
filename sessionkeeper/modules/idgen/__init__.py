"""
ID Generation Module - Black Box Interface

Purpose: Produce session identifiers
Interface: IdentifierGenerator.generate(), encode62(), decode62()
Hidden: Clock coarsening, random low bits, alphabet

Replaceable with any callable returning a URL-safe string.
"""

from .generator import (
    BASE62_ALPHABET,
    ID_WIDTH,
    IdentifierGenerator,
    decode62,
    default_id_generator,
    encode62,
)

__all__ = [
    "BASE62_ALPHABET",
    "ID_WIDTH",
    "IdentifierGenerator",
    "decode62",
    "default_id_generator",
    "encode62",
]
