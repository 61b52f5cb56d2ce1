"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Message list rendering (user, assistant, error)
    - Incremental update of the in-flight assistant reply
    - Streaming / non-streaming toggle and input affordances

Contains no protocol logic. Delegates requests and stream handling to src.relay.
"""
