"""Turn frame lines into typed stream events.

Backends speak slightly different dialects: answer text arrives as
``content`` or ``chunk``. Both are normalized to :class:`ContentDelta` here
and nowhere else.

Malformed payloads are expected while streaming and are dropped silently.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from vectormind.errors import MalformedFrame
from vectormind.models.schemas import (
    Complete,
    ContentDelta,
    Event,
    Source,
    SourceSet,
    StreamError,
)
from vectormind.streaming.decoder import FRAME_PREFIX

logger = logging.getLogger(__name__)

DONE_SENTINEL = "[DONE]"
DELTA_FIELDS = ("content", "chunk")


def _decode_payload(payload: str) -> dict[str, Any]:
    """Decode a frame payload into a JSON object.

    Raises:
        MalformedFrame: If the payload is not a JSON object.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedFrame(f"Invalid JSON payload: {e}") from e

    if not isinstance(data, dict):
        raise MalformedFrame(f"Expected a JSON object, got {type(data).__name__}")

    return data


def _parse_sources(raw_sources: list[Any]) -> list[Source]:
    sources: list[Source] = []
    for i, raw in enumerate(raw_sources):
        try:
            sources.append(Source.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Skipping invalid source at index {i}: {e.error_count()} errors")
    return sources


def interpret(frame: str) -> list[Event]:
    """Interpret one frame line.

    Args:
        frame: A complete line starting with ``data: ``.

    Returns:
        The events carried by the frame, in the order they apply. An empty
        list means the frame is discarded.
    """
    payload = frame.removeprefix(FRAME_PREFIX)

    if payload == DONE_SENTINEL:
        return [Complete()]

    try:
        data = _decode_payload(payload)
    except MalformedFrame as e:
        logger.debug(f"Discarding frame: {e.message}")
        return []

    error = data.get("error")
    if isinstance(error, str) and error:
        return [StreamError(message=error)]

    events: list[Event] = []

    for field in DELTA_FIELDS:
        text = data.get(field)
        if isinstance(text, str) and text:
            events.append(ContentDelta(text=text))
            break

    raw_sources = data.get("sources")
    if isinstance(raw_sources, list):
        events.append(SourceSet(sources=_parse_sources(raw_sources)))

    if data.get("done") is True:
        events.append(Complete())

    if not events:
        logger.debug(f"Discarding frame with unrecognized fields: {sorted(data)}")

    return events
