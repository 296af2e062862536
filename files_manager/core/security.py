import base64
import binascii
import hashlib
from typing import Tuple

from files_manager.core.exceptions import Unauthorized


def get_password_hash(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def extract_basic_credential(authorization: str | None) -> str:
    """Return the base64 payload of a ``Basic`` authorization header."""
    if not authorization:
        raise Unauthorized()
    scheme, _, credential = authorization.strip().partition(" ")
    if scheme.lower() != "basic" or not credential.strip():
        raise Unauthorized()
    return credential.strip()


def decode_credential(credential: str) -> Tuple[str, str]:
    """Split a base64 ``email:password`` credential into its two parts."""
    try:
        decoded = base64.b64decode(credential, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        raise Unauthorized()
    email, sep, password = decoded.partition(":")
    if not sep or not email:
        raise Unauthorized()
    return email, password
