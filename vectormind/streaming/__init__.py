"""Streaming conversational exchange engine.

Consumes the backend's ``data: `` event stream and grows the assistant
message while the answer is still in flight.

Pipeline:
    - FrameDecoder: chunked bytes to complete frame lines
    - interpret: frame line to typed events (malformed frames dropped)
    - ConversationAssembler: events folded into the assistant message
    - ExchangeController: request, cancellation and lifecycle callbacks
"""

from vectormind.streaming.assembler import ConversationAssembler
from vectormind.streaming.controller import Exchange, ExchangeController, ExchangeState
from vectormind.streaming.decoder import FrameDecoder
from vectormind.streaming.interpreter import interpret

__all__ = [
    "ConversationAssembler",
    "Exchange",
    "ExchangeController",
    "ExchangeState",
    "FrameDecoder",
    "interpret",
]
