"""Unit tests for session id memoization and storage backends"""

import os
import re

import pytest

from journey.session import (
    SESSION_KEY,
    USER_ID_KEY,
    generate_session_id,
    get_session_id,
    get_user_id,
)
from journey.storage import InMemoryStorage, JsonFileStorage, StorageAccessError

SESSION_PATTERN = re.compile(r"^session_\d{13}_[0-9a-z]{9}$")


class TestSessionId:
    """Tests for get_session_id"""

    def test_format(self):
        assert SESSION_PATTERN.match(generate_session_id())

    def test_idempotent_within_session(self):
        storage = InMemoryStorage()

        ids = {get_session_id(storage) for _ in range(20)}

        assert len(ids) == 1
        assert storage.get_item(SESSION_KEY) == ids.pop()

    def test_reuses_existing_value(self):
        storage = InMemoryStorage({SESSION_KEY: "session_existing"})
        assert get_session_id(storage) == "session_existing"

    def test_new_session_new_id(self):
        assert get_session_id(InMemoryStorage()) != get_session_id(InMemoryStorage())

    def test_writes_storage_once(self):
        class CountingStorage(InMemoryStorage):
            writes = 0

            def set_item(self, key, value):
                CountingStorage.writes += 1
                super().set_item(key, value)

        storage = CountingStorage()
        for _ in range(5):
            get_session_id(storage)

        assert CountingStorage.writes == 1


class TestUserId:
    """Tests for get_user_id"""

    def test_anonymous(self):
        assert get_user_id(InMemoryStorage()) is None

    def test_empty_value_is_anonymous(self):
        assert get_user_id(InMemoryStorage({USER_ID_KEY: ""})) is None

    def test_signed_in(self):
        assert get_user_id(InMemoryStorage({USER_ID_KEY: "user-7"})) == "user-7"


class TestJsonFileStorage:
    """Tests for JsonFileStorage"""

    def test_persists_across_instances(self, tmp_path):
        filepath = os.path.join(tmp_path, "slots.json")

        JsonFileStorage(filepath).set_item(USER_ID_KEY, "user-9")

        assert JsonFileStorage(filepath).get_item(USER_ID_KEY) == "user-9"

    def test_missing_file_reads_none(self, tmp_path):
        storage = JsonFileStorage(os.path.join(tmp_path, "absent.json"))
        assert storage.get_item("anything") is None

    def test_remove_item(self, tmp_path):
        storage = JsonFileStorage(os.path.join(tmp_path, "slots.json"))
        storage.set_item("a", "1")
        storage.remove_item("a")
        assert storage.get_item("a") is None

    def test_corrupt_file_raises(self, tmp_path):
        filepath = os.path.join(tmp_path, "slots.json")
        with open(filepath, "w") as f:
            f.write("{not json")

        with pytest.raises(StorageAccessError):
            JsonFileStorage(filepath).get_item(SESSION_KEY)
