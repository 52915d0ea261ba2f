"""Unit tests for individual components in isolation.

Coverage:
    - streaming/: frame decoder, interpreter and assembler
    - models/: Pydantic validation and wire aliases
    - config, session and PDF checks

Leverages pytest-check for multiple assertions per test.
"""
