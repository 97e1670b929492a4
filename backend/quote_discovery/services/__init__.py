"""Service Layer: imperative shell around the pure core.

Invariants:
    - Services own mutable state and IO; computations are delegated to core/
    - Collaborators and storage are injected, never imported concretely by the engine
"""
