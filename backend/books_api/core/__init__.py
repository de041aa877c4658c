"""Core Layer: error taxonomy, document mapping and boundary protocols.

Invariants:
    - No module in core/ imports from api/ or infrastructure/
    - No IO: mapping functions are pure and deterministic
"""
