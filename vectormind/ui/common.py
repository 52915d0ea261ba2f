"""Helpers shared by the NiceGUI pages."""

import logging
import re

from vectormind.api.client import BackendClient
from vectormind.api.session import Session
from vectormind.config import ClientConfig
from vectormind.errors import TransportError

logger = logging.getLogger(__name__)

CUSTOM_CSS = """
<style>
    body { background: #0f1115; min-height: 100vh; }
    .app-container { background: #171a21; border-radius: 12px; overflow: hidden; }
    .header { border-bottom: 1px solid #2a2f3a; }
    .message-user { background: #4f46e5; color: white; border-radius: 18px 18px 4px 18px; }
    .message-assistant {
        background: #1f232c;
        color: #e5e7eb;
        border: 1px solid #2a2f3a;
        border-radius: 18px 18px 18px 4px;
    }
    .typing-dot {
        width: 8px; height: 8px;
        background: #818cf8;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }
    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
    .message-assistant a { color: #a5b4fc; }
</style>
"""

_INLINE_RULES = [
    (r"`([^`]+)`", r'<code class="bg-gray-800 text-pink-400 px-1 rounded text-xs">\1</code>'),
    (r"\*\*(.+?)\*\*", r"<strong>\1</strong>"),
    (r"\*([^*]+)\*", r"<em>\1</em>"),
    (r"\[([^\]]+)\]\(([^)]+)\)", r'<a href="\2" class="underline" target="_blank">\1</a>'),
]

_LIST_PATTERNS = [
    (re.compile(r"^[-*]\s+"), '<ul class="list-disc list-inside my-2">', "</ul>"),
    (re.compile(r"^\d+\.\s+"), '<ol class="list-decimal list-inside my-2">', "</ol>"),
]


def _wrap_lists(text: str) -> str:
    lines: list[str] = []
    open_tag: str | None = None
    for line in text.split("\n"):
        stripped = line.strip()
        for pattern, start, end in _LIST_PATTERNS:
            if pattern.match(stripped):
                if open_tag != end:
                    if open_tag:
                        lines.append(open_tag)
                    lines.append(start)
                    open_tag = end
                lines.append(f"<li>{pattern.sub('', stripped)}</li>")
                break
        else:
            if open_tag:
                lines.append(open_tag)
                open_tag = None
            lines.append(line)
    if open_tag:
        lines.append(open_tag)
    return "\n".join(lines)


def markdown_to_html(text: str) -> str:
    """Render the small markdown subset used by answers.

    Supports code blocks, inline code, bold, italic, links and lists. The
    input may be a partial answer, so unterminated markup is left as text.
    """
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    text = re.sub(
        r"```(\w*)\n?([\s\S]*?)```",
        r'<pre class="bg-gray-900 rounded-lg p-3 my-2 overflow-x-auto text-xs"><code>\2</code></pre>',
        text,
    )
    for pattern, replacement in _INLINE_RULES:
        text = re.sub(pattern, replacement, text)
    return _wrap_lists(text).replace("\n", "<br>")


MIN_PASSWORD_LENGTH = 6


def validate_registration(email: str, password: str, confirm_password: str) -> str | None:
    """Check the registration form before it is submitted.

    Returns:
        The message to show, or None if the form is acceptable.
    """
    if not email.strip() or not password:
        return "Email and password are required"
    if password != confirm_password:
        return "Passwords do not match"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None


async def load_session(config: ClientConfig) -> Session:
    """Build the session for a page visit.

    The token comes from configuration; the profile is fetched from the
    backend so role checks work. A failed lookup leaves an anonymous profile.
    """
    session = Session(token=config.auth_token)
    if session.is_authenticated:
        try:
            session.user = await BackendClient(config, session).get_current_user()
        except TransportError as e:
            logger.warning(f"Could not load current user: {e.message}")
    return session
