"""Shared fixtures.

Environment is set before any app module is imported, since ``core.config``
builds its settings at import time.
"""

import asyncio
import os
import tempfile

import pytest

os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "correct horse")
os.environ.setdefault("RESEND_API_KEY", "re_test_key")
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), 'mailroom-test.db')}",
)
os.environ["IMAP_HOST"] = ""

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

import emails.models  # noqa: F401
from core.database import Base, get_db
from main import app


@pytest.fixture
def session_factory(tmp_path):
    """A fresh SQLite database per test, with tables created.

    Tables are created through a sync engine so the fixture never touches an
    event loop; NullPool keeps async connections from outliving their loop.
    """
    db_path = tmp_path / "emails.db"
    sync_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def run(coro):
    """Run a coroutine from a sync test (outside any running loop)."""
    return asyncio.run(coro)


@pytest.fixture
def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_raw_email(
    sender: str = "alice@example.com",
    recipient: str = "inbox@mailroom.dev",
    subject: str | None = "Hello",
    text: str | None = "Plain body",
    html: str | None = "<p>HTML body</p>",
) -> bytes:
    """Build a raw RFC 822 message; ``None`` leaves a header or part out."""
    from email.message import EmailMessage

    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = recipient
    if subject is not None:
        msg["Subject"] = subject
    if text is not None:
        msg.set_content(text)
    if html is not None:
        if text is not None:
            msg.add_alternative(html, subtype="html")
        else:
            msg.set_content(html, subtype="html")
    return msg.as_bytes()


# an encoded-word whose charset Python has no codec for
BOGUS_CHARSET_EMAIL = (
    b"From: =?x-bogus?q?abc?= <a@b.c>\r\n"
    b"To: inbox@mailroom.dev\r\n"
    b"Subject: =?x-bogus?q?weird?=\r\n"
    b"\r\n"
    b"body\r\n"
)
