"""VectorMind - chat client for a retrieval-augmented generation backend.

Streams answers over Server-Sent-Events style frames with httpx, models
payloads with Pydantic and renders the conversation with NiceGUI.

Components:
    - streaming: frame decoding, interpretation, assembly and exchange control
    - api: session provider and REST client for the backend
    - parsing: pre-upload PDF checks
    - ui: chat and settings pages
    - models: message, event and REST schemas
"""

__version__ = "0.1.0"
