"""
Tests for the JSON file store against a temporary directory.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Make the coderun_api package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from coderun_api.repositories import InMemoryStore, JSONFileStore, StoreError  # noqa: E402


@pytest.fixture()
def data_file(tmp_path):
    return tmp_path / "nested" / "userdata.json"


def test_ensure_creates_seed_document(data_file):
    store = JSONFileStore(data_file)
    store.ensure()
    assert json.loads(data_file.read_text(encoding="utf-8")) == {"users": []}


def test_ensure_is_idempotent_and_keeps_data(data_file):
    store = JSONFileStore(data_file)
    data_file.parent.mkdir(parents=True)
    data_file.write_text(json.dumps({"users": [{"userID": "u1", "codeRuns": []}]}), encoding="utf-8")

    store.ensure()
    store.ensure()

    assert store.load()["users"][0]["userID"] == "u1"


def test_save_then_load_writes_pretty_utf8(data_file):
    store = JSONFileStore(data_file)
    store.save({"users": [{"userID": "ü", "email": "", "codeRuns": []}]})

    raw = data_file.read_text(encoding="utf-8")
    assert '"userID": "ü"' in raw
    assert raw.startswith("{\n  ")
    assert store.load()["users"][0]["userID"] == "ü"


@pytest.mark.parametrize(
    "content",
    ["", "not json", "[]", '{"users": {}}', '{"other": 1}', "null"],
)
def test_corrupt_documents_load_as_empty(data_file, content):
    data_file.parent.mkdir(parents=True)
    data_file.write_text(content, encoding="utf-8")
    assert JSONFileStore(data_file).load() == {"users": []}


@pytest.mark.parametrize("content", [b"\xff\xfe", b'{"users": [\xff\xfe]}'])
def test_invalid_utf8_loads_as_empty(data_file, content):
    data_file.parent.mkdir(parents=True)
    data_file.write_bytes(content)
    assert JSONFileStore(data_file).load() == {"users": []}


def test_save_recreates_missing_directory(data_file):
    store = JSONFileStore(data_file)
    store.ensure()
    data_file.unlink()
    data_file.parent.rmdir()

    store.save({"users": [{"userID": "u1", "codeRuns": []}]})

    assert store.load()["users"][0]["userID"] == "u1"


def test_read_failure_raises_store_error(tmp_path):
    # A directory in place of the file exists but cannot be read as text
    target = tmp_path / "userdata.json"
    target.mkdir()
    with pytest.raises(StoreError):
        JSONFileStore(target).load()


def test_write_failure_raises_store_error(tmp_path):
    target = tmp_path / "userdata.json"
    target.mkdir()
    with pytest.raises(StoreError):
        JSONFileStore(target).save({"users": []})


def test_in_memory_store_does_not_share_state():
    store = InMemoryStore()
    doc = store.load()
    doc["users"].append({"userID": "u1"})
    assert store.load() == {"users": []}

    store.save(doc)
    doc["users"].clear()
    assert store.load()["users"] == [{"userID": "u1"}]


def test_in_memory_store_normalizes_seed():
    assert InMemoryStore({"users": "bad"}).load() == {"users": []}
