"""Unit tests for individual components in isolation.

Coverage:
    - relay/: frame encoding, producer, writer, reader, accumulator
    - completion/: configuration validation and agno wrapper

Uses mocks for the agno model and agent classes.
"""
