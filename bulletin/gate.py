"""Admin password check. Plain comparison against the configured secret -- no tokens, no lockout."""

from bulletin.models.schemas import AdminAuth

INCORRECT_PASSWORD = "Incorrect password"


def check_password(submitted: object, secret: str) -> AdminAuth:
    if isinstance(submitted, str) and submitted == secret:
        return AdminAuth(success=True)
    return AdminAuth(success=False, message=INCORRECT_PASSWORD)
