"""Server-side sessions persisted in the key-value service."""

from .config import SessionConfig
from .dependencies import SessionDep
from .dependencies import SessionStoreDep
from .dependencies import get_session
from .dependencies import get_session_store
from .middleware import SessionMiddleware
from .models import RequestSession
from .models import SessionCookie
from .models import SessionFound
from .models import SessionMissing
from .models import SessionRecord
from .models import StoreFailure
from .models import StoreSuccess
from .security import SecurityManager
from .store import SessionStore

__all__ = [
    "RequestSession",
    "SecurityManager",
    "SessionConfig",
    "SessionCookie",
    "SessionDep",
    "SessionFound",
    "SessionMiddleware",
    "SessionMissing",
    "SessionRecord",
    "SessionStore",
    "SessionStoreDep",
    "StoreFailure",
    "StoreSuccess",
    "get_session",
    "get_session_store",
]
