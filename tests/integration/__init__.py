"""Integration tests for components working together.

Coverage:
    - ExchangeController streaming through a real httpx client
    - BackendClient REST calls and error mapping
    - FastAPI host endpoints

The backend is replaced by httpx.MockTransport with scripted bodies, so
chunk boundaries are exactly the ones each test chooses.
"""
