"""Core Layer — pure domain logic: types, errors, sanitizer, payment decoding.

Invariants:
    - Core never imports from infrastructure/ or api/
    - IO reaches core only through repository_protocols
"""
