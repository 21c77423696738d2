import argparse
import getpass
from typing import Dict, Optional
from cryptography.fernet import Fernet
from pathlib import Path

DEFAULT_ENV = ".env"

def generate_key() -> str:
    return Fernet.generate_key().decode()

def encrypt_with_key(secret: str, key: str) -> str:
    return Fernet(key.encode()).encrypt(secret.encode()).decode()

def write_to_env(values: Dict[str, str], env_path: str = DEFAULT_ENV) -> None:
    """Set each KEY=value in the env file, replacing existing lines for the same key."""
    p = Path(env_path)
    lines = []
    if p.exists():
        lines = p.read_text().splitlines()
    remaining = dict(values)
    new_lines = []
    for line in lines:
        name = line.split("=", 1)[0].strip()
        if "=" in line and name in remaining:
            new_lines.append(f"{name}={remaining.pop(name)}")
        else:
            new_lines.append(line)
    if remaining:
        if new_lines and new_lines[-1] != "":
            new_lines.append("")
        for name, value in remaining.items():
            new_lines.append(f"{name}={value}")
    p.write_text("\n".join(new_lines) + "\n")
    print(f"[+] Written {', '.join(values)} to {env_path}")

def build_values(key: str, imap_password: Optional[str]) -> Dict[str, str]:
    values = {"FERNET_KEY": key}
    if imap_password:
        values["IMAP_PASSWORD_ENCRYPTED"] = encrypt_with_key(imap_password, key)
    return values

def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate a Fernet key, optionally encrypt the IMAP password, and write both to a .env file.")
    parser.add_argument("--write", action="store_true", help="Write values into .env (or file provided by --env-path).")
    parser.add_argument("--env-path", default=DEFAULT_ENV, help="Path to .env file to write (default: .env).")
    parser.add_argument("--imap-password", action="store_true", help="Prompt for the IMAP password and store it encrypted.")
    args = parser.parse_args(argv)

    key = generate_key()
    password = getpass.getpass("IMAP password: ") if args.imap_password else None
    values = build_values(key, password)

    print("Generated Fernet key:")
    print(key)
    print()
    if args.write:
        write_to_env(values, args.env_path)
        abs_path = Path(args.env_path).resolve()
        print(f"[!] Do not commit {abs_path} to version control.")
    else:
        if "IMAP_PASSWORD_ENCRYPTED" in values:
            print(f"IMAP_PASSWORD_ENCRYPTED={values['IMAP_PASSWORD_ENCRYPTED']}")
        print("Run with --write to insert/update the values in a .env file.")
        print("Example: python -m utils.create_fernet --imap-password --write --env-path .env")

if __name__ == "__main__":
    main()
