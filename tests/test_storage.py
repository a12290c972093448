from schedconsole.runtime.storage import KeyValueStore


def test_set_get_remove_roundtrip(tmp_path):
    store = KeyValueStore(tmp_path / "nested" / "storage.json")
    assert store.get("jwtToken") is None

    store.set("jwtToken", "abc")
    store.set("other", "1")
    assert store.get("jwtToken") == "abc"

    reopened = KeyValueStore(tmp_path / "nested" / "storage.json")
    assert reopened.get("jwtToken") == "abc"

    reopened.remove("jwtToken")
    assert store.get("jwtToken") is None
    assert store.get("other") == "1"
    assert not (tmp_path / "nested" / "storage.json.tmp").exists()


def test_remove_missing_key_is_noop(tmp_path):
    store = KeyValueStore(tmp_path / "storage.json")
    store.remove("jwtToken")
    assert not (tmp_path / "storage.json").exists()


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")
    store = KeyValueStore(path)
    assert store.get("jwtToken") is None

    store.set("jwtToken", "fresh")
    assert store.get("jwtToken") == "fresh"
