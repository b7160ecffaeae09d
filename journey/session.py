"""
Session and Identity Resolution

The session id is generated client-side on first use and cached in
session-scoped storage, so every event of a browsing session shares it
without a server round-trip.
"""

import random
import string
import time
from typing import Optional

from .storage import KeyValueStorage

SESSION_KEY = "journey_session_id"
USER_ID_KEY = "user_id"

_BASE36 = string.digits + string.ascii_lowercase


def generate_session_id() -> str:
    """session_<epoch ms>_<9 random base36 chars>"""
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


def get_session_id(session_storage: KeyValueStorage) -> str:
    """Return the cached session id, creating and storing it if missing"""
    session_id = session_storage.get_item(SESSION_KEY)
    if not session_id:
        session_id = generate_session_id()
        session_storage.set_item(SESSION_KEY, session_id)
    return session_id


def get_user_id(local_storage: KeyValueStorage) -> Optional[str]:
    """Persisted user id of an authenticated visitor, None when anonymous"""
    return local_storage.get_item(USER_ID_KEY) or None
