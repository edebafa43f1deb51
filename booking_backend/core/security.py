import secrets

from booking_backend.core.config import settings


def verify_api_key(provided: str) -> bool:
    expected = settings.api_key
    if not expected:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
