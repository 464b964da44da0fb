"""Markup dialects for outbound chat messages."""

import html
from typing import Protocol


class Markup(Protocol):
    """Semantic text styles understood by the delivery channel."""

    def bold(self, text: str) -> str: ...

    def italic(self, text: str) -> str: ...

    def code(self, text: str) -> str: ...

    def pre(self, text: str) -> str: ...

    def escape(self, text: str) -> str: ...


class HtmlMarkup:
    """Telegram HTML parse mode."""

    parse_mode = "HTML"

    def bold(self, text: str) -> str:
        return f"<b>{text}</b>"

    def italic(self, text: str) -> str:
        return f"<i>{text}</i>"

    def code(self, text: str) -> str:
        return f"<code>{text}</code>"

    def pre(self, text: str) -> str:
        return f"<pre>{text}</pre>"

    def escape(self, text: str) -> str:
        return html.escape(text, quote=False)


class PlainMarkup:
    """No styling; text passes through unchanged."""

    parse_mode = None

    def bold(self, text: str) -> str:
        return text

    def italic(self, text: str) -> str:
        return text

    def code(self, text: str) -> str:
        return text

    def pre(self, text: str) -> str:
        return text

    def escape(self, text: str) -> str:
        return text
