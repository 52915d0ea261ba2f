"""Fold stream events into the assistant message being built."""

import logging
from collections.abc import Callable

from vectormind.errors import BackendStreamError, ExchangeError
from vectormind.models.schemas import (
    Complete,
    ContentDelta,
    Event,
    Message,
    MessageStatus,
    SourceSet,
    StreamError,
)

logger = logging.getLogger(__name__)

MessageCallback = Callable[[Message], None]
ErrorCallback = Callable[[Message, ExchangeError], None]


class ConversationAssembler:
    """Builds one assistant message from an ordered event sequence.

    The assembler is the only writer of the message while it streams. Once a
    completion or an error has been applied it is closed and every later
    event is ignored, so the terminal notification fires exactly once.

    Args:
        message: The assistant message to grow, with status ``streaming``.
        on_content: Called with the message after every appended delta.
        on_complete: Called once when the answer is complete.
        on_error: Called once with the message and the failure.
    """

    def __init__(
        self,
        message: Message,
        on_content: MessageCallback | None = None,
        on_complete: MessageCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.message = message
        self._on_content = on_content
        self._on_complete = on_complete
        self._on_error = on_error
        self._closed = False
        self.error: ExchangeError | None = None

    @property
    def closed(self) -> bool:
        """Whether a completion or an error has been applied."""
        return self._closed

    @property
    def completed(self) -> bool:
        return self._closed and self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def apply(self, event: Event) -> None:
        """Apply one event to the message.

        Args:
            event: The next interpreted event, in arrival order.
        """
        if self._closed:
            logger.debug(f"Ignoring {event.kind} event after the message was closed")
            return

        if isinstance(event, ContentDelta):
            self.message.content += event.text
            if self._on_content:
                self._on_content(self.message)
        elif isinstance(event, SourceSet):
            self.message.sources = list(event.sources)
        elif isinstance(event, Complete):
            self.message.status = MessageStatus.COMPLETE
            self._closed = True
            logger.debug(f"Message {self.message.id} complete ({len(self.message.content)} chars)")
            if self._on_complete:
                self._on_complete(self.message)
        elif isinstance(event, StreamError):
            self.fail(BackendStreamError(event.message))

    def fail(self, error: ExchangeError) -> None:
        """Close the message as failed, keeping the content received so far.

        Args:
            error: The failure to report.
        """
        if self._closed:
            logger.debug(f"Ignoring failure after the message was closed: {error.message}")
            return

        self._closed = True
        self.error = error
        logger.warning(
            f"Message {self.message.id} failed after {len(self.message.content)} chars: "
            f"{error.message}"
        )
        if self._on_error:
            self._on_error(self.message, error)
