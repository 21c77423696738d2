"""Inbound Handler: turns one arriving message into one stored row.

Delivery paths (the IMAP listener, the ``receive_mail`` pipe script) build an
:class:`InboundMessage` and call :func:`handle_inbound`. Failures never reach
the caller: they come back as an :class:`InboundResult` and are logged here.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email import message_from_bytes
from email.header import decode_header
from email.message import Message
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.database import async_session
from emails import services

logger = logging.getLogger("emails.inbound")

SUBJECT_PLACEHOLDER = "(No Subject)"


def _decode_header_value(h):
    if not h:
        return ""
    parts = decode_header(str(h))
    out = []
    for val, enc in parts:
        if isinstance(val, bytes):
            try:
                out.append(val.decode(enc or "utf-8", errors="ignore"))
            except LookupError:
                out.append(val.decode("utf-8", errors="ignore"))
        else:
            out.append(val)
    return "".join(out)


def _read_part(msg: Message, ctype: str) -> str:
    if msg.is_multipart():
        for part in msg.walk():
            disp = str(part.get("Content-Disposition") or "")
            if part.get_content_type() == ctype and "attachment" not in disp:
                return _decode_payload(part)
        return ""
    if msg.get_content_type() == ctype:
        return _decode_payload(msg)
    return ""


def _decode_payload(part: Message) -> str:
    payload = part.get_payload(decode=True)
    if not payload:
        return ""
    charset = part.get_content_charset() or "utf-8"
    try:
        return payload.decode(charset, errors="ignore")
    except LookupError:
        return payload.decode("utf-8", errors="ignore")


class InboundMessage:
    """An arriving message: envelope addresses, headers and lazy bodies."""

    def __init__(self, msg: Message, sender: Optional[str] = None, recipient: Optional[str] = None):
        self._msg = msg
        self.sender = sender or _decode_header_value(msg.get("From"))
        self.recipient = recipient or _decode_header_value(msg.get("To"))

    @classmethod
    def from_bytes(cls, raw: bytes, sender: Optional[str] = None, recipient: Optional[str] = None):
        return cls(message_from_bytes(raw), sender=sender, recipient=recipient)

    @property
    def headers(self) -> Message:
        return self._msg

    def subject(self) -> Optional[str]:
        value = self._msg.get("Subject")
        return _decode_header_value(value) if value is not None else None

    def read_text(self) -> str:
        return _read_part(self._msg, "text/plain")

    def read_html(self) -> str:
        return _read_part(self._msg, "text/html")


@dataclass
class InboundResult:
    stored: bool
    email_id: Optional[int] = None
    error: Optional[str] = None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def process_inbound(
    db: AsyncSession,
    message: InboundMessage,
    received_at: Optional[str] = None,
) -> InboundResult:
    try:
        subject = message.subject() or SUBJECT_PLACEHOLDER
        text_body = message.read_text()
        html_body = message.read_html()
        e = await services.insert_email(
            db,
            sender=message.sender,
            recipient=message.recipient,
            subject=subject,
            text_body=text_body,
            html_body=html_body,
            received_at=received_at or _now_iso(),
        )
    except Exception as exc:
        return InboundResult(stored=False, error=f"{type(exc).__name__}: {exc}")
    return InboundResult(stored=True, email_id=e.id)


async def handle_inbound(message: InboundMessage, session_factory=async_session) -> InboundResult:
    try:
        async with session_factory() as db:
            result = await process_inbound(db, message)
    except Exception as exc:
        result = InboundResult(stored=False, error=f"{type(exc).__name__}: {exc}")

    if result.stored:
        logger.info("Stored inbound email id=%s from=%s", result.email_id, message.sender)
    else:
        logger.error("Failed to store inbound email from=%s: %s", message.sender, result.error)
    return result
