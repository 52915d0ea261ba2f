"""Test package for the VectorMind client.

Structure:
    - unit/: Frame decoding, interpretation, assembly, models and config
    - integration/: Exchange controller and REST client against a mocked
      httpx transport, FastAPI host through ASGITransport

No network access is required. Leverages pytest with pytest-check for soft
assertions.
"""
