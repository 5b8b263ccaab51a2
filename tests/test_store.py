"""Tests for the JSON record store."""

import json

import pytest

from cf_tunnel_buddy.common.exceptions import DuplicateNameError, NotFoundError
from cf_tunnel_buddy.tunnels.models import TunnelRecord
from cf_tunnel_buddy.tunnels.store import RecordStore


class TestRecordStoreLoad:
    """Test loading records from disk."""

    def test_missing_file_loads_empty(self, store):
        """A store without a file holds no records"""
        assert store.load() == []

    def test_corrupt_file_loads_empty(self, store):
        """Unparseable JSON is treated as an empty store"""
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json")

        assert store.load() == []

    def test_non_array_loads_empty(self, store):
        """A JSON object instead of an array is treated as an empty store"""
        store.path.parent.mkdir(parents=True)
        store.path.write_text(json.dumps({"name": "my-app"}))

        assert store.load() == []

    def test_invalid_records_are_skipped(self, store):
        """Entries that are not valid records are dropped, valid ones kept"""
        store.path.parent.mkdir(parents=True)
        store.path.write_text(
            json.dumps([{"name": "good", "url": "http://localhost:80"}, {"url": "x"}, 42])
        )

        records = store.load()

        assert [r.name for r in records] == ["good"]

    def test_reads_on_disk_field_names(self, store):
        """createdAt and importedAt map onto the record fields"""
        store.path.parent.mkdir(parents=True)
        store.path.write_text(
            json.dumps(
                [
                    {
                        "name": "imported-one",
                        "id": "abc",
                        "url": None,
                        "hostname": None,
                        "createdAt": "2024-01-01",
                        "imported": True,
                        "importedAt": "2024-02-02T00:00:00.000Z",
                    }
                ]
            )
        )

        record = store.load()[0]

        assert record.created_at == "2024-01-01"
        assert record.imported is True
        assert record.imported_at == "2024-02-02T00:00:00.000Z"


class TestRecordStoreWrite:
    """Test adding, updating and removing records."""

    def test_add_persists_pretty_printed_array(self, store, sample_record):
        """Added records are written as an indented JSON array"""
        store.add(sample_record)

        text = store.path.read_text()
        data = json.loads(text)
        assert text.startswith("[\n  {")
        assert data == [
            {
                "name": "my-app",
                "id": "6ff42ae2-765d-4adf-8112-31c55c1551ef",
                "url": "http://localhost:8080",
                "hostname": "app.example.com",
                "createdAt": "2024-01-01T10:00:00.000Z",
            }
        ]

    def test_add_creates_parent_directory(self, tmp_path, sample_record):
        """The configuration directory is created on first write"""
        store = RecordStore(tmp_path / "nested" / "dir" / "tunnels.json")

        store.add(sample_record)

        assert store.path.exists()

    def test_one_record_per_name(self, store):
        """Adding distinct names keeps one record each"""
        for name in ["alpha", "beta", "gamma"]:
            store.add(TunnelRecord(name=name, url="http://localhost:80"))

        assert [r.name for r in store.load()] == ["alpha", "beta", "gamma"]
        assert store.names() == {"alpha", "beta", "gamma"}

    def test_duplicate_add_fails_without_mutation(self, store, sample_record):
        """Re-adding a name raises and leaves the stored record untouched"""
        store.add(sample_record)
        before = store.path.read_bytes()

        with pytest.raises(DuplicateNameError):
            store.add(TunnelRecord(name="my-app", url="http://other:9999"))

        assert store.path.read_bytes() == before
        assert store.get("my-app").url == "http://localhost:8080"

    def test_get_missing_returns_none(self, store, sample_record):
        """get() returns None for unknown names"""
        store.add(sample_record)

        assert store.get("unknown") is None

    def test_update_clears_hostname_only(self, store, sample_record):
        """A None hostname clears that field and leaves the others alone"""
        store.add(sample_record)

        updated = store.update("my-app", {"hostname": None})

        assert updated.hostname is None
        reloaded = store.get("my-app")
        assert reloaded.hostname is None
        assert reloaded.url == sample_record.url
        assert reloaded.id == sample_record.id
        assert reloaded.created_at == sample_record.created_at

    def test_update_missing_leaves_file_identical(self, store, sample_record):
        """Updating an absent name raises and does not rewrite the file"""
        store.add(sample_record)
        before = store.path.read_bytes()

        with pytest.raises(NotFoundError):
            store.update("unknown", {"url": "http://localhost:1"})

        assert store.path.read_bytes() == before

    def test_update_accepts_alias_keys(self, store, sample_record):
        """Updates keyed by on-disk names reach the right field"""
        store.add(sample_record)

        updated = store.update("my-app", {"createdAt": "2025-05-05"})

        assert updated.created_at == "2025-05-05"

    def test_unknown_fields_survive_round_trip(self, store):
        """Fields this tool does not know about are kept on rewrite"""
        store.path.parent.mkdir(parents=True)
        store.path.write_text(
            json.dumps([{"name": "legacy", "url": None, "note": "keep me"}])
        )

        store.update("legacy", {"url": "http://localhost:3000"})

        data = json.loads(store.path.read_text())
        assert data[0]["note"] == "keep me"
        assert data[0]["url"] == "http://localhost:3000"

    def test_remove_returns_removed_record(self, store, sample_record):
        """remove() drops the record and returns it"""
        store.add(sample_record)
        store.add(TunnelRecord(name="other", url="http://localhost:81"))

        removed = store.remove("my-app")

        assert removed.name == "my-app"
        assert store.names() == {"other"}

    def test_remove_missing_raises(self, store):
        """Removing an unknown name raises NotFoundError"""
        with pytest.raises(NotFoundError):
            store.remove("ghost")
