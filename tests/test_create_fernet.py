"""Key tool tests: .env rewriting and password encryption."""

from cryptography.fernet import Fernet

from utils.create_fernet import build_values, generate_key, main, write_to_env


def test_generated_key_is_usable():
    key = generate_key()

    assert Fernet(key.encode()).decrypt(Fernet(key.encode()).encrypt(b"x")) == b"x"


def test_build_values_encrypts_password():
    key = generate_key()

    values = build_values(key, "imap-pass")

    assert values["FERNET_KEY"] == key
    assert Fernet(key.encode()).decrypt(values["IMAP_PASSWORD_ENCRYPTED"].encode()) == b"imap-pass"


def test_build_values_without_password():
    assert list(build_values(generate_key(), None)) == ["FERNET_KEY"]


def test_write_to_env_replaces_existing_and_keeps_others(tmp_path):
    env = tmp_path / ".env"
    env.write_text("ADMIN_USERNAME=admin\nFERNET_KEY=old\n")

    write_to_env({"FERNET_KEY": "new", "IMAP_PASSWORD_ENCRYPTED": "tok"}, str(env))

    lines = env.read_text().splitlines()
    assert "ADMIN_USERNAME=admin" in lines
    assert "FERNET_KEY=new" in lines
    assert "FERNET_KEY=old" not in lines
    assert "IMAP_PASSWORD_ENCRYPTED=tok" in lines


def test_write_to_env_creates_file(tmp_path):
    env = tmp_path / "fresh.env"

    write_to_env({"FERNET_KEY": "abc"}, str(env))

    assert env.read_text() == "FERNET_KEY=abc\n"


def test_main_writes_env(tmp_path, capsys):
    env = tmp_path / ".env"

    main(["--write", "--env-path", str(env)])

    assert env.read_text().startswith("FERNET_KEY=")
    assert "Generated Fernet key" in capsys.readouterr().out
