"""Tests for the OSS filesystem adapter."""

import io

import pytest

from oss_adapter.adapter import OssAdapter
from oss_adapter.interface import Config, Visibility
from oss_adapter.models import EntryType, ObjectEntry
from oss_adapter.results import Failure, Success

BUCKET = "test-bucket"


class TestWrite:
    """Test buffered and streamed writes."""

    def test_write_then_read(self, adapter, fake_client):
        """Test reading returns exactly the bytes written."""
        assert adapter.write("docs/a.txt", b"hello world").ok

        assert "uploads/docs/a.txt" in fake_client.objects[BUCKET]
        assert adapter.read("docs/a.txt") == Success(b"hello world")

    def test_write_returns_metadata(self, adapter):
        """Test the write result is normalized from the request options."""
        result = adapter.write("docs/a.txt", b"hello", {"mimetype": "text/plain"})

        assert result.ok
        assert result.value.type is EntryType.file
        assert result.value.path == "docs/a.txt"
        assert result.value.dirname == "docs"
        assert result.value.mimetype == "text/plain"

    def test_write_overwrites(self, adapter):
        adapter.write("a.txt", b"first")
        adapter.update("a.txt", b"second")

        assert adapter.read("a.txt").value == b"second"

    def test_option_mapping(self, adapter, fake_client):
        """Test recognized config keys map to request options."""
        adapter.write(
            "a.txt",
            b"hello",
            {
                "contentType": "text/plain",
                "contentLength": 5,
                "headers": {"Cache-Control": "no-cache"},
                "unknown": "ignored",
            },
        )

        options = fake_client.called("put_object")[0][4]
        assert options == {
            "Content-Type": "text/plain",
            "Content-Length": 5,
            "headers": {"Cache-Control": "no-cache"},
        }

    def test_option_aliases(self, adapter, fake_client):
        adapter.write("a.txt", b"hello", Config({"mimetype": "text/csv", "size": 5}))

        options = fake_client.called("put_object")[0][4]
        assert options["Content-Type"] == "text/csv"
        assert options["Content-Length"] == 5

    @pytest.mark.parametrize(
        "visibility, acl",
        [
            (Visibility.public, "public-read"),
            ("public", "public-read"),
            (Visibility.private, "private"),
            ("anything-else", "private"),
        ],
    )
    def test_visibility_sets_acl_header(self, adapter, fake_client, visibility, acl):
        """Test visibility maps to the object ACL header."""
        adapter.write("a.txt", b"x", {"visibility": visibility})

        options = fake_client.called("put_object")[0][4]
        assert options["headers"]["x-oss-object-acl"] == acl

    def test_visibility_keeps_caller_headers(self, adapter, fake_client):
        adapter.write(
            "a.txt",
            b"x",
            {"visibility": "public", "headers": {"Cache-Control": "no-cache"}},
        )

        headers = fake_client.called("put_object")[0][4]["headers"]
        assert headers == {
            "Cache-Control": "no-cache",
            "x-oss-object-acl": "public-read",
        }

    def test_default_options_merged(self, fake_client):
        """Test adapter-level options are sent with every upload."""
        adapter = OssAdapter(
            fake_client, BUCKET, options={"headers": {"x-oss-storage-class": "IA"}}
        )

        adapter.write("a.txt", b"x", {"mimetype": "text/plain"})

        options = fake_client.called("put_object")[0][4]
        assert options["headers"] == {"x-oss-storage-class": "IA"}
        assert options["Content-Type"] == "text/plain"
        assert adapter.options == {"headers": {"x-oss-storage-class": "IA"}}

    def test_write_failure(self, adapter, fake_client):
        """Test backend errors become a Failure result."""
        fake_client.failing.add("put_object")

        result = adapter.write("a.txt", b"x")

        assert result == Failure("write", "a.txt")

    def test_write_stream_from_memory(self, adapter, fake_client):
        """Test non-file streams are read and uploaded with put_object."""
        result = adapter.write_stream("a.bin", io.BytesIO(b"\x00\x01\x02"))

        assert result.ok
        assert fake_client.called("upload_file") == []
        assert adapter.read("a.bin").value == b"\x00\x01\x02"

    def test_write_stream_from_file(self, adapter, fake_client, tmp_path):
        """Test file-backed streams are uploaded from the local file."""
        source = tmp_path / "report.csv"
        source.write_bytes(b"a,b\n1,2\n")

        with source.open("rb") as stream:
            result = adapter.update_stream("reports/r.csv", stream, {"visibility": "public"})

        assert result.ok
        call = fake_client.called("upload_file")[0]
        assert call[2] == "uploads/reports/r.csv"
        assert call[3] == str(source)
        assert adapter.read("reports/r.csv").value == b"a,b\n1,2\n"
        assert adapter.get_visibility("reports/r.csv").value is Visibility.public

    def test_write_stream_from_partly_read_file(self, adapter, fake_client, tmp_path):
        """Test a file stream is uploaded from its current position."""
        source = tmp_path / "data.bin"
        source.write_bytes(b"HEADERbody")

        with source.open("rb") as stream:
            stream.read(6)
            result = adapter.write_stream("data.bin", stream)

        assert result.ok
        assert fake_client.called("upload_file") == []
        assert adapter.read("data.bin").value == b"body"

    def test_write_stream_failure(self, adapter, fake_client, tmp_path):
        fake_client.failing.add("upload_file")
        source = tmp_path / "a.txt"
        source.write_bytes(b"x")

        with source.open("rb") as stream:
            result = adapter.write_stream("a.txt", stream)

        assert result == Failure("update_stream", "a.txt")


class TestRead:
    """Test reads, existence and metadata."""

    def test_read_missing(self, adapter):
        assert adapter.read("missing.txt") == Failure("read", "missing.txt")

    def test_read_stream(self, adapter):
        adapter.write("a.txt", b"streamed")

        result = adapter.read_stream("a.txt")

        assert result.ok
        assert result.value.read() == b"streamed"

    def test_read_stream_missing(self, adapter):
        assert adapter.read_stream("missing.txt") == Failure("read_stream", "missing.txt")

    def test_has(self, adapter, fake_client):
        adapter.write("a.txt", b"x")

        assert adapter.has("a.txt") == Success(True)
        assert adapter.has("b.txt") == Success(False)
        assert fake_client.called("does_object_exist")[0][2] == "uploads/a.txt"

    def test_has_failure(self, adapter, fake_client):
        fake_client.failing.add("does_object_exist")

        result = adapter.has("a.txt")

        assert not result.ok
        assert result.unwrap_or(False) is False

    def test_get_metadata(self, adapter, fake_client):
        fake_client.add(
            BUCKET,
            "uploads/img/logo.png",
            b"x" * 2048,
            headers={"Content-Type": "image/png"},
        )

        result = adapter.get_metadata("img/logo.png")

        assert result.ok
        metadata = result.value
        assert metadata.type is EntryType.file
        assert metadata.path == "img/logo.png"
        assert metadata.dirname == "img"
        assert metadata.size == 2048
        assert metadata.mimetype == "image/png"
        assert metadata.timestamp == 1700000000

    def test_get_metadata_missing(self, adapter):
        """Test metadata for a missing object is a failure, not an empty record."""
        assert adapter.get_metadata("missing.txt") == Failure("get_metadata", "missing.txt")

    def test_metadata_aliases(self, adapter):
        adapter.write("a.txt", b"abc")

        assert adapter.get_size("a.txt").value.size == 3
        assert adapter.get_mimetype("a.txt").value.mimetype == "application/octet-stream"
        assert adapter.get_timestamp("a.txt").value.timestamp == 1700000000


class TestDeleteCopyRename:
    """Test delete, copy and rename."""

    def test_delete(self, adapter, fake_client):
        adapter.write("a.txt", b"x")

        assert adapter.delete("a.txt") == Success(True)
        assert adapter.has("a.txt").value is False

    def test_delete_missing(self, adapter):
        """Test a not-found report from the backend fails the delete."""
        assert adapter.has("never.txt").value is False
        assert adapter.delete("never.txt") == Failure("delete", "never.txt")

    def test_copy(self, adapter, fake_client):
        adapter.write("a.txt", b"x")

        assert adapter.copy("a.txt", "b.txt") == Success(True)
        assert fake_client.called("copy_object")[0][1:] == (
            BUCKET,
            "uploads/a.txt",
            BUCKET,
            "uploads/b.txt",
        )
        assert adapter.read("b.txt").value == b"x"
        assert adapter.has("a.txt").value is True

    def test_copy_missing(self, adapter):
        assert adapter.copy("missing.txt", "b.txt") == Failure("copy", "missing.txt")

    def test_rename(self, adapter):
        adapter.write("a.txt", b"x")

        assert adapter.rename("a.txt", "b.txt") == Success(True)
        assert adapter.has("a.txt").value is False
        assert adapter.read("b.txt").value == b"x"

    def test_rename_missing_source(self, adapter, fake_client):
        """Test renaming a missing file fails and does not create the target."""
        result = adapter.rename("missing.txt", "b.txt")

        assert result == Failure("rename", "missing.txt")
        assert adapter.has("b.txt").value is False
        assert fake_client.called("delete_object") == []

    def test_rename_delete_failure_leaves_duplicate(self, adapter, fake_client):
        """Test a failed delete after copying reports failure with both copies."""
        adapter.write("a.txt", b"x")
        fake_client.failing.add("delete_object")

        result = adapter.rename("a.txt", "b.txt")

        assert result == Failure("rename", "a.txt")
        assert adapter.has("a.txt").value is True
        assert adapter.has("b.txt").value is True

    def test_rename_onto_itself_keeps_file(self, adapter, fake_client):
        """Test renaming to the same key neither copies nor deletes."""
        adapter.write("a.txt", b"x")

        assert adapter.rename("a.txt", "/a.txt") == Success(True)
        assert adapter.read("a.txt").value == b"x"
        assert fake_client.called("copy_object") == []
        assert fake_client.called("delete_object") == []

    def test_rename_missing_onto_itself(self, adapter):
        assert adapter.rename("missing.txt", "missing.txt") == Failure(
            "rename", "missing.txt"
        )


class TestDirectories:
    """Test directory creation, listing and deletion."""

    def test_create_dir(self, adapter, fake_client):
        result = adapter.create_dir("new")

        assert result == Success(ObjectEntry(EntryType.dir, "new"))
        assert "uploads/new/" in fake_client.objects[BUCKET]

    def test_create_dir_failure(self, adapter, fake_client):
        fake_client.failing.add("create_object_dir")

        assert adapter.create_dir("new") == Failure("create_dir", "new")

    def test_list_contents(self, adapter, fake_client):
        fake_client.add(BUCKET, "uploads/d/f.txt", b"0123456789")
        fake_client.add(BUCKET, "uploads/d/sub/", b"")

        result = adapter.list_contents("d")

        assert result == Success(
            [
                ObjectEntry(EntryType.file, "d/f.txt", 1700000000, 10),
                ObjectEntry(EntryType.dir, "d/sub", 0),
            ]
        )

    def test_list_contents_failure(self, adapter, fake_client):
        fake_client.failing.add("list_objects")

        assert adapter.list_contents("d") == Failure("list_contents", "d")

    def test_delete_dir(self, adapter, fake_client):
        """Test every entry is removed in one batched delete."""
        fake_client.add(BUCKET, "uploads/d/", b"")
        fake_client.add(BUCKET, "uploads/d/f.txt", b"x")
        fake_client.add(BUCKET, "uploads/d/sub/", b"")
        fake_client.add(BUCKET, "uploads/d/sub/g.txt", b"y")
        fake_client.add(BUCKET, "uploads/keep.txt", b"z")

        assert adapter.delete_dir("d") == Success(True)

        calls = fake_client.called("delete_objects")
        assert len(calls) == 1
        assert calls[0][2] == [
            "uploads/d/",
            "uploads/d/f.txt",
            "uploads/d/sub/",
            "uploads/d/sub/g.txt",
        ]
        assert list(fake_client.objects[BUCKET]) == ["uploads/keep.txt"]

    def test_delete_dir_batch_failure(self, adapter, fake_client):
        """Test a failed batch is reported as a single failure."""
        fake_client.add(BUCKET, "uploads/d/f.txt", b"x")
        fake_client.failing.add("delete_objects")

        assert adapter.delete_dir("d") == Failure("delete_dir", "d")

    def test_delete_dir_listing_failure(self, adapter, fake_client):
        fake_client.failing.add("list_objects")

        assert adapter.delete_dir("d") == Failure("delete_dir", "d")
        assert fake_client.called("delete_objects") == []

    def test_delete_missing_dir(self, adapter, fake_client):
        """Test an empty key batch is rejected by the backend."""
        assert adapter.delete_dir("nope") == Failure("delete_dir", "nope")
        assert fake_client.called("delete_objects")[0][2] == []


class TestVisibility:
    """Test object ACLs."""

    def test_set_and_get_visibility(self, adapter, fake_client):
        adapter.write("a.txt", b"x")

        assert adapter.set_visibility("a.txt", Visibility.public) == Success(
            Visibility.public
        )
        assert fake_client.called("put_object_acl")[0][3] == "public-read"
        assert adapter.get_visibility("a.txt") == Success(Visibility.public)

        adapter.set_visibility("a.txt", "private")
        assert adapter.get_visibility("a.txt") == Success(Visibility.private)

    def test_default_acl_is_private(self, adapter):
        """Test any ACL other than public-read reads as private."""
        adapter.write("a.txt", b"x")

        assert adapter.get_visibility("a.txt") == Success(Visibility.private)

    def test_visibility_failures(self, adapter):
        assert adapter.set_visibility("missing.txt", Visibility.public) == Failure(
            "set_visibility", "missing.txt"
        )
        assert adapter.get_visibility("missing.txt") == Failure(
            "get_visibility", "missing.txt"
        )

    def test_invalid_visibility(self, adapter):
        with pytest.raises(ValueError):
            adapter.set_visibility("a.txt", "world-writable")


class TestAccessors:
    """Test adapter accessors and prefix helpers."""

    def test_bucket_and_client(self, adapter, fake_client):
        assert adapter.bucket == BUCKET
        assert adapter.client is fake_client

    def test_path_prefix_helpers(self, adapter):
        assert adapter.get_path_prefix() == "uploads/"
        assert adapter.apply_path_prefix("a.txt") == "uploads/a.txt"
        assert adapter.remove_path_prefix("uploads/a.txt") == "a.txt"

        adapter.set_path_prefix("media")
        assert adapter.apply_path_prefix("a.txt") == "media/a.txt"
