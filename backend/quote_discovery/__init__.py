"""Quote Discovery Package: search, analytics and recommendations over a personal quote corpus.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
