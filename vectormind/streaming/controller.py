"""Exchange controller: one streamed question/answer cycle at a time.

The controller owns the conversation transcript. Each ``send`` appends the
user message and an empty assistant message, POSTs the query to the
streaming endpoint and pushes every received chunk through
FrameDecoder -> interpret -> ConversationAssembler inside a single task, so
deltas are applied strictly in arrival order.

Sending while an exchange is still running cancels the running exchange
first and waits for it to settle.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

import httpx

from vectormind.config import ClientConfig
from vectormind.errors import ExchangeError, TransportError
from vectormind.models.schemas import ChatRequest, Message, MessageStatus, Role
from vectormind.streaming.assembler import ConversationAssembler, ErrorCallback, MessageCallback
from vectormind.streaming.decoder import FrameDecoder
from vectormind.streaming.interpreter import interpret

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


class ExchangeState(str, Enum):
    """Lifecycle of the controller's current exchange."""

    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


ACTIVE_STATES = frozenset({ExchangeState.SENDING, ExchangeState.STREAMING})


@dataclass
class Exchange:
    """State of one request/response cycle."""

    query: str
    message: Message
    decoder: FrameDecoder = field(default_factory=FrameDecoder)
    cancel_requested: bool = False


class ExchangeController:
    """Drives streamed exchanges for one conversation.

    Args:
        config: Client configuration (endpoint URL, timeouts).
        token_provider: Returns the current bearer token, or None.
            Defaults to the token from the configuration.
        conversation_id: Conversation identifier sent with each query.
            Defaults to the configured one.
        client: Shared httpx client. When omitted, a client is created for
            each exchange and closed afterwards.
        on_start: Called with the assistant message when the exchange
            task starts, before the request is sent.
        on_content: Called with the assistant message after every delta.
        on_complete: Called once when the answer completes.
        on_error: Called once with the message and the failure.
        on_cancel: Called once when the exchange is cancelled.
    """

    def __init__(
        self,
        config: ClientConfig,
        token_provider: TokenProvider | None = None,
        conversation_id: str | None = None,
        client: httpx.AsyncClient | None = None,
        on_start: MessageCallback | None = None,
        on_content: MessageCallback | None = None,
        on_complete: MessageCallback | None = None,
        on_error: ErrorCallback | None = None,
        on_cancel: MessageCallback | None = None,
    ) -> None:
        self._config = config
        self._token_provider = token_provider or (lambda: config.auth_token)
        self.conversation_id = conversation_id or config.conversation_id
        self._client = client
        self._timeout = httpx.Timeout(None, connect=config.connect_timeout)

        self._on_start = on_start
        self._on_content = on_content
        self._on_complete = on_complete
        self._on_error = on_error
        self._on_cancel = on_cancel

        self._state = ExchangeState.IDLE
        self._transcript: list[Message] = []
        self._exchange: Exchange | None = None
        self._task: asyncio.Task[None] | None = None
        self._error: ExchangeError | None = None

    @property
    def state(self) -> ExchangeState:
        return self._state

    @property
    def transcript(self) -> list[Message]:
        """Messages of the conversation, oldest first."""
        return self._transcript

    @property
    def error(self) -> ExchangeError | None:
        """Failure of the last exchange, if it failed."""
        return self._error

    @property
    def is_active(self) -> bool:
        return self._state in ACTIVE_STATES

    async def send(self, query: str) -> Message:
        """Send a query and stream the answer into the transcript.

        The user message is appended right away. If another exchange is
        still active it is cancelled, and the new request goes out once it
        has settled.

        Args:
            query: The user's question.

        Returns:
            The assistant message once the exchange completed, failed or
            was cancelled through :meth:`cancel`. Failures are reported
            through ``on_error`` and :attr:`error`, not raised.

        Raises:
            ValueError: If the query is empty.
            asyncio.CancelledError: If the task awaiting ``send`` is
                cancelled from outside, e.g. by ``asyncio.timeout``.
        """
        text = query.strip()
        if not text:
            raise ValueError("Query must not be empty")

        user_message = Message(role=Role.USER, content=text, status=MessageStatus.COMPLETE)
        self._transcript.append(user_message)

        while self._task is not None and not self._task.done():
            logger.info("Cancelling the active exchange for a new query")
            self.cancel()
            await asyncio.wait({self._task})

        if self._state is not ExchangeState.IDLE:
            self._set_state(ExchangeState.IDLE)

        # No await between here and create_task: the slot is claimed atomically.
        assistant_message = Message(role=Role.ASSISTANT)
        self._place_answer(user_message, assistant_message)
        exchange = Exchange(query=text, message=assistant_message)
        self._exchange = exchange
        self._error = None
        self._set_state(ExchangeState.SENDING)
        self._task = asyncio.create_task(self._run(exchange))

        try:
            await self._task
        except asyncio.CancelledError:
            # Swallow only the cancellation this controller asked for.
            current = asyncio.current_task()
            if not exchange.cancel_requested or (current is not None and current.cancelling()):
                raise
        finally:
            if self._exchange is exchange:
                self._exchange = None

        return assistant_message

    def cancel(self) -> bool:
        """Stop the active exchange.

        The partial answer stays in the transcript with status
        ``streaming``. Events that were already received but not applied
        are dropped.

        Returns:
            True if an exchange was cancelled, False if none was active.
        """
        exchange = self._exchange
        if exchange is None or self._state not in ACTIVE_STATES:
            return False

        self._mark_cancelled(exchange)
        if self._task is not None and self._task is not asyncio.current_task():
            self._task.cancel()
        return True

    def reset(self, conversation_id: str | None = None) -> None:
        """Start a new conversation, cancelling any active exchange."""
        self.cancel()
        self._transcript = []
        self._error = None
        self._set_state(ExchangeState.IDLE)
        if conversation_id:
            self.conversation_id = conversation_id

    def _set_state(self, state: ExchangeState) -> None:
        logger.debug(f"Exchange state {self._state.value} -> {state.value}")
        self._state = state

    def _place_answer(self, user_message: Message, assistant_message: Message) -> None:
        """Insert the answer right after the question it belongs to."""
        for i, message in enumerate(self._transcript):
            if message is user_message:
                self._transcript.insert(i + 1, assistant_message)
                return
        # The transcript was reset while this query waited for its turn.
        self._transcript.extend([user_message, assistant_message])

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "text/event-stream",
        }
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _mark_cancelled(self, exchange: Exchange) -> None:
        exchange.cancel_requested = True
        self._set_state(ExchangeState.CANCELLED)
        logger.info(
            f"Exchange cancelled after {len(exchange.message.content)} chars "
            f"(conversation {self.conversation_id})"
        )
        if self._on_cancel:
            self._on_cancel(exchange.message)

    def _handle_complete(self, message: Message) -> None:
        self._set_state(ExchangeState.COMPLETED)
        logger.info(f"Exchange completed with {len(message.sources)} sources")
        if self._on_complete:
            self._on_complete(message)

    def _handle_error(self, message: Message, error: ExchangeError) -> None:
        self._set_state(ExchangeState.FAILED)
        self._error = error
        if self._on_error:
            self._on_error(message, error)

    async def _run(self, exchange: Exchange) -> None:
        assembler = ConversationAssembler(
            exchange.message,
            on_content=self._on_content,
            on_complete=self._handle_complete,
            on_error=self._handle_error,
        )
        try:
            if self._on_start:
                self._on_start(exchange.message)
            if self._client is not None:
                await self._stream(self._client, exchange, assembler)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    await self._stream(client, exchange, assembler)
        except asyncio.CancelledError:
            if not exchange.cancel_requested:
                self._mark_cancelled(exchange)
                raise
        except Exception as e:
            # Errors raised by callbacks end the exchange as failed.
            if self._state in ACTIVE_STATES:
                logger.error(f"Exchange aborted by unexpected error: {e!r}")
                assembler.fail(ExchangeError(f"Unexpected error: {e}"))
            raise
        finally:
            exchange.decoder.close()
            if self._exchange is exchange:
                self._exchange = None

    async def _stream(
        self,
        client: httpx.AsyncClient,
        exchange: Exchange,
        assembler: ConversationAssembler,
    ) -> None:
        """Issue the request and feed the response body to the assembler."""
        request = ChatRequest(message=exchange.query, conversation_id=self.conversation_id)
        url = self._config.url(self._config.stream_path)

        try:
            async with client.stream(
                "POST",
                url,
                json=request.model_dump(by_alias=True),
                headers=self._headers(),
                timeout=self._timeout,
            ) as response:
                response.raise_for_status()
                if exchange.cancel_requested:
                    return
                self._set_state(ExchangeState.STREAMING)
                logger.debug(f"Streaming answer from {url}")
                await self._consume(response, exchange, assembler)
        except httpx.HTTPStatusError as e:
            assembler.fail(
                TransportError(
                    f"HTTP {e.response.status_code}",
                    status_code=e.response.status_code,
                )
            )
            return
        except httpx.RequestError as e:
            assembler.fail(TransportError(f"Connection failed: {e}"))
            return

        if not assembler.closed and not exchange.cancel_requested:
            assembler.fail(TransportError("Stream ended before completion"))

    async def _consume(
        self,
        response: httpx.Response,
        exchange: Exchange,
        assembler: ConversationAssembler,
    ) -> None:
        async for chunk in response.aiter_bytes():
            for frame in exchange.decoder.feed(chunk):
                for event in interpret(frame):
                    if exchange.cancel_requested:
                        return
                    assembler.apply(event)
                    if assembler.closed:
                        return
            if exchange.cancel_requested:
                return
