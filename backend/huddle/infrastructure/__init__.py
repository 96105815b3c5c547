"""Infrastructure Layer — database access and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from core/ rule modules
    - All store failures mapped to DatabaseError (retryable, 503)
"""
