"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports core/ policy logic (errors and types only)
    - All external calls wrapped with retry/timeout/error mapping
"""
