"""Infrastructure Layer: MongoDB client, book repository and logging setup.

Invariants:
    - Driver exceptions never leave this layer untranslated
"""
