"""
sessionkeeper - Server-Side Sessions for ASGI Services

Assigns an opaque session identifier to each client, keeps per-session
key/value state in a pluggable store, and round-trips the identifier through
a sealed (signed and encrypted) cookie.

Architecture:
- Each module is self-contained with clear interfaces
- Stores are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- idgen: Session identifier generation
- store: Storage contract, in-memory and Redis implementations
- sealing: Cookie sealing capability
- session: Per-request session handle and coordinator
- middleware: FastAPI/Starlette integration
"""

__version__ = "1.0.0"
