"""Pipe delivery: read one raw RFC 822 message from stdin and store it.

Meant for an MTA pipe transport, e.g. in Postfix master.cf:

    mailroom unix - n n - - pipe
      user=mailroom argv=/usr/bin/python /srv/mailroom/receive_mail.py --sender ${sender} --recipient ${recipient}

Always exits 0: a storage failure is logged, never bounced back to the sender.
"""
import argparse
import asyncio
import logging
import sys

from core.config import settings
from core.database import init_db
from emails.inbound import InboundMessage, InboundResult, handle_inbound

logger = logging.getLogger("receive_mail")

async def receive(raw: bytes, sender=None, recipient=None):
    try:
        await init_db()
    except Exception as exc:
        logger.error("Could not prepare email store: %s", exc)
    try:
        message = InboundMessage.from_bytes(raw, sender=sender, recipient=recipient)
    except Exception as exc:
        logger.error("Could not parse inbound email: %s", exc)
        return InboundResult(stored=False, error=f"{type(exc).__name__}: {exc}")
    return await handle_inbound(message)

def main(argv=None):
    parser = argparse.ArgumentParser(description="Store one inbound email read from stdin.")
    parser.add_argument("--sender", help="Envelope sender (overrides the From header).")
    parser.add_argument("--recipient", help="Envelope recipient (overrides the To header).")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    raw = sys.stdin.buffer.read()
    asyncio.run(receive(raw, sender=args.sender, recipient=args.recipient))
    return 0

if __name__ == "__main__":
    sys.exit(main())
