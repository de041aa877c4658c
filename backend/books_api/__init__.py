"""Books API Package: CRUD service over a MongoDB books collection.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
