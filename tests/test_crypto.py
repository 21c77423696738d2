from unittest.mock import patch

import pytest
from cryptography.fernet import Fernet

from core import crypto


def test_round_trip_with_configured_key():
    with patch.object(crypto.settings, "FERNET_KEY", Fernet.generate_key().decode()):
        token = crypto.encrypt_secret("mailbox password")

        assert token != "mailbox password"
        assert crypto.decrypt_secret(token) == "mailbox password"


def test_missing_key_raises():
    with patch.object(crypto.settings, "FERNET_KEY", None):
        with pytest.raises(RuntimeError, match="FERNET_KEY"):
            crypto.encrypt_secret("x")
