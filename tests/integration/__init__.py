"""Integration tests for components working together as a system.

Coverage:
    - API endpoints with real HTTP requests through ASGITransport
    - Streaming client reading the real event stream produced by the app
    - Chunk fragmentation and transport failures through httpx MockTransport
"""
