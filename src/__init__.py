"""Chat Relay - minimal chat front end for a hosted LLM completion API.

Combines FastAPI for HTTP streaming, Agno for model access,
NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and streaming responses
    - completion: Upstream provider configuration and access
    - relay: Event stream framing, reassembly and accumulation
    - ui: Web interface for chat interactions
    - models: Request/response and conversation schemas
"""

__version__ = "0.1.0"
