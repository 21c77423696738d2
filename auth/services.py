import hmac
from core.config import settings

def _matches(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode(), expected.encode())

def check_credentials(username: str, password: str) -> bool:
    # both comparisons always run, so timing does not reveal which field failed
    user_ok = _matches(username, settings.ADMIN_USERNAME)
    password_ok = _matches(password, settings.ADMIN_PASSWORD)
    return user_ok and password_ok
