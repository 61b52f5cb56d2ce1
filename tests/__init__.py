"""Test package for Chat Relay.

Structure:
    - unit/: Relay components, configuration and provider wrapper in isolation
    - integration/: HTTP endpoints and client <-> server runs over ASGI

No network access and no API key required: the upstream provider is replaced
with FakeCompletionService through FastAPI dependency overrides.
Leverages pytest with pytest-check for soft assertions.
"""
