import asyncio
import logging
from typing import Optional
import aioimaplib
from core.config import settings
from core.crypto import decrypt_secret
from emails.inbound import InboundMessage, InboundResult, handle_inbound

logger = logging.getLogger("emails.listener")
_LISTENER_TASK: Optional[asyncio.Task] = None
_STOP_EVENT: Optional[asyncio.Event] = None

def _imap_password() -> str:
    if settings.IMAP_PASSWORD_ENCRYPTED:
        return decrypt_secret(settings.IMAP_PASSWORD_ENCRYPTED)
    return settings.IMAP_PASSWORD or ""

def _raw_message(lines) -> Optional[bytes]:
    # the RFC822 literal is the only bytearray line in an aioimaplib FETCH response
    for line in lines:
        if isinstance(line, bytearray):
            return bytes(line)
    return None

async def _fetch_and_handle(client, msg_id: str, handler=handle_inbound) -> Optional[InboundResult]:
    response = await client.fetch(msg_id, "(RFC822)")
    if response.result != "OK":
        logger.warning("IMAP fetch of message %s failed: %s", msg_id, response.result)
        return None
    raw = _raw_message(response.lines)
    if not raw:
        return None
    try:
        message = InboundMessage.from_bytes(raw)
    except Exception as exc:
        logger.error("Could not parse IMAP message %s: %s", msg_id, exc)
        return InboundResult(stored=False, error=f"{type(exc).__name__}: {exc}")
    return await handler(message)

async def poll_once(client, handler=handle_inbound) -> int:
    """Hand every UNSEEN message to the handler; returns how many were fetched."""
    response = await client.search("UNSEEN")
    if response.result != "OK" or not response.lines or not response.lines[0]:
        return 0
    ids = response.lines[0].split()
    count = 0
    for mid in ids:
        msg_id = mid.decode() if isinstance(mid, (bytes, bytearray)) else str(mid)
        if await _fetch_and_handle(client, msg_id, handler) is not None:
            count += 1
    return count

async def _polling_loop(stop_event: asyncio.Event, interval: int):
    """Polling-based mail listener"""
    client = aioimaplib.IMAP4_SSL(host=settings.IMAP_HOST, port=settings.IMAP_PORT)
    try:
        await client.wait_hello_from_server()
        response = await client.login(settings.IMAP_USER, _imap_password())
        if response.result != "OK":
            logger.error("IMAP login failed for %s: %s", settings.IMAP_USER, response.lines)
            return
        await client.select("INBOX")
        logger.info("IMAP polling started for %s@%s", settings.IMAP_USER, settings.IMAP_HOST)

        while not stop_event.is_set():
            try:
                await poll_once(client)
            except Exception as exc:
                logger.error("IMAP poll failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
    finally:
        try:
            await client.logout()
        except Exception as exc:
            logger.debug("IMAP logout failed: %s", exc)
        logger.info("IMAP polling stopped for %s@%s", settings.IMAP_USER, settings.IMAP_HOST)

def start_listener(interval: Optional[int] = None):
    global _LISTENER_TASK, _STOP_EVENT
    if _LISTENER_TASK is not None and not _LISTENER_TASK.done():
        return
    _STOP_EVENT = asyncio.Event()
    _LISTENER_TASK = asyncio.create_task(_polling_loop(_STOP_EVENT, interval or settings.IMAP_POLL_INTERVAL))
    logger.info("Started IMAP listener")

async def stop_listener():
    global _LISTENER_TASK, _STOP_EVENT
    task = _LISTENER_TASK
    if not task:
        return
    _STOP_EVENT.set()
    done, _ = await asyncio.wait({task}, timeout=30)
    if not done:
        task.cancel()
    elif task.exception() is not None:
        logger.error("IMAP listener exited with error: %s", task.exception())
    _LISTENER_TASK = None
    _STOP_EVENT = None
    logger.info("Stopped IMAP listener")
