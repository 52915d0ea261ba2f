"""NiceGUI interface - thin presentation layer over the exchange engine.

Responsibilities:
    - Chat page rendering the transcript while answers stream in
    - Stop button, interrupted and failed answer states
    - Admin settings page for documents and user permissions

Contains no protocol logic. Delegates to vectormind.streaming and vectormind.api.
"""
