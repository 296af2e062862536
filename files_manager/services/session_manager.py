import logging
import uuid

from files_manager.core.exceptions import Unauthorized
from files_manager.core.redis_client import SessionStore
from files_manager.core.security import decode_credential, get_password_hash
from files_manager.models.user import User
from files_manager.monitoring.setup import sessions_ended, sessions_issued
from files_manager.services.credential_store import CredentialStore

logger = logging.getLogger("files-manager")

AUTH_KEY_PREFIX = "auth_"
DEFAULT_SESSION_TTL = 60 * 60 * 24


def session_key(token: str) -> str:
    return f"{AUTH_KEY_PREFIX}{token}"


class SessionManager:
    """Issues, resolves and revokes opaque session tokens.

    A token maps to a user id in the session store under ``auth_<token>``
    and lives until its TTL elapses or it is revoked. A user may hold any
    number of live tokens at once.
    """

    def __init__(
        self,
        session_store: SessionStore,
        credential_store: CredentialStore,
        ttl_seconds: int = DEFAULT_SESSION_TTL,
    ):
        self.session_store = session_store
        self.credential_store = credential_store
        self.ttl_seconds = ttl_seconds

    async def issue_session(self, credential: str) -> str:
        email, password = decode_credential(credential)
        user = await self.credential_store.find_user_by_email_and_password_hash(
            email, get_password_hash(password)
        )
        if not user:
            raise Unauthorized()

        token = str(uuid.uuid4())
        await self.session_store.set(session_key(token), str(user.id), self.ttl_seconds)
        sessions_issued.inc()
        logger.info("Session issued for user %s", user.id)
        return token

    async def end_session(self, token: str | None) -> None:
        if not token:
            raise Unauthorized()
        key = session_key(token)
        user_id = await self.session_store.get(key)
        if not user_id:
            raise Unauthorized()
        await self.session_store.delete(key)
        sessions_ended.inc()
        logger.info("Session ended for user %s", user_id)

    async def resolve_session(self, token: str | None) -> User:
        if not token:
            raise Unauthorized()
        user_id = await self.session_store.get(session_key(token))
        if not user_id:
            raise Unauthorized()
        user = await self.credential_store.find_user_by_id(user_id)
        if not user:
            raise Unauthorized()
        return user
