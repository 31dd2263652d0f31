"""Larder Application Package — role-gated inventory and recipe management API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
