"""Session persistence over the durable key-value service."""

from logging import getLogger

from pydantic import ValidationError

from turbodash.backends import BaseKeyValueBackend

from .config import SESSION_KEY_PREFIX
from .exceptions import SessionDecodeError
from .exceptions import SessionStoreError
from .models import ReadResult
from .models import SessionFound
from .models import SessionMissing
from .models import SessionRecord
from .models import StoreFailure
from .models import StoreSuccess
from .models import WriteResult

logger = getLogger(__name__)


class SessionStore:
    """Adapts a key-value backend to the session middleware's store contract.

    Every operation returns a result value. Backend and decoding errors are
    wrapped in ``StoreFailure`` and never escape the store.
    """

    def __init__(
        self, backend: BaseKeyValueBackend, prefix: str = SESSION_KEY_PREFIX
    ) -> None:
        self.backend = backend
        self.prefix = prefix

    def _make_key(self, session_id: str) -> str:
        return f"{self.prefix}{session_id}"

    async def read(self, session_id: str) -> ReadResult:
        try:
            raw = await self.backend.get(self._make_key(session_id))
        except Exception as e:
            logger.warning("Session backend read failed for <%s>: %s", session_id, e)
            return StoreFailure(SessionStoreError(str(e)))

        if raw is None:
            return SessionMissing()

        try:
            record = SessionRecord.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Stored session <%s> could not be decoded", session_id)
            return StoreFailure(SessionDecodeError(str(e)))

        return SessionFound(record)

    async def write(self, session_id: str, record: SessionRecord) -> WriteResult:
        try:
            await self.backend.set(self._make_key(session_id), record.model_dump_json())
        except Exception as e:
            logger.warning("Session backend write failed for <%s>: %s", session_id, e)
            return StoreFailure(SessionStoreError(str(e)))
        return StoreSuccess()

    async def destroy(self, session_id: str) -> WriteResult:
        try:
            await self.backend.delete(self._make_key(session_id))
        except Exception as e:
            logger.warning("Session backend delete failed for <%s>: %s", session_id, e)
            return StoreFailure(SessionStoreError(str(e)))
        return StoreSuccess()

    async def touch(self, session_id: str, record: SessionRecord) -> WriteResult:
        """Re-persist ``record`` so backend-side expiry restarts."""
        return await self.write(session_id, record)

    async def ids(self) -> list[str]:
        """List stored session ids."""
        start = len(self.prefix)
        return [key[start:] for key in await self.backend.keys(self.prefix)]
