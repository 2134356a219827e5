"""Tests for Drive listing, download, upload and deletion."""

import json

import pytest

from detakit.constants import MAX_DELETE_NAMES
from detakit.exceptions import NotFound, PayloadError, UploadAbortedError


@pytest.fixture
def stocked_drive(drive, service):
    service.files["photos"].update(
        {
            "2023/a.png": b"a",
            "2024/b.png": b"b",
            "2024/c.png": b"c",
            "2024/d.png": b"d",
            "readme.txt": b"hi",
        }
    )
    return drive


class TestList:
    def test_list_all_names(self, stocked_drive):
        listing = stocked_drive.list()
        assert listing.names == ["2023/a.png", "2024/b.png", "2024/c.png", "2024/d.png", "readme.txt"]
        assert listing.last == ""

    def test_list_with_prefix_and_limit(self, stocked_drive, service):
        listing = stocked_drive.list(prefix="2024/", limit=2)
        assert listing.names == ["2024/b.png", "2024/c.png"]
        assert listing.last == "2024/c.png"
        params = service.calls("GET", "/files")[0].url.params
        assert params["prefix"] == "2024/"
        assert params["limit"] == "2"
        assert "last" not in params

    def test_default_limit_is_sent(self, stocked_drive, service):
        stocked_drive.list()
        assert service.calls("GET", "/files")[0].url.params["limit"] == "1000"

    def test_list_resumes_from_cursor(self, stocked_drive):
        listing = stocked_drive.list(prefix="2024/", last="2024/c.png")
        assert listing.names == ["2024/d.png"]

    def test_list_all_follows_cursor(self, stocked_drive, service):
        names = list(stocked_drive.list_all(limit=2))
        assert names == ["2023/a.png", "2024/b.png", "2024/c.png", "2024/d.png", "readme.txt"]
        assert len(service.calls("GET", "/files")) == 3


class TestGet:
    def test_download(self, stocked_drive, service):
        assert stocked_drive.get("2024/b.png") == b"b"
        request = service.calls("GET", "/files/download")[0]
        assert "name=2024%2Fb.png" in request.url.raw_path.decode()

    def test_missing_file(self, drive):
        with pytest.raises(NotFound):
            drive.get("nope.png")


class TestPut:
    def test_put_from_path(self, drive, service, tmp_path):
        source = tmp_path / "cat.png"
        source.write_bytes(b"\x89PNG data")
        result = drive.put("cats/cat.png", path=source)
        assert result["name"] == "cats/cat.png"
        assert service.files["photos"]["cats/cat.png"] == b"\x89PNG data"

    def test_content_and_path_are_exclusive(self, drive, tmp_path):
        with pytest.raises(PayloadError):
            drive.put("a", b"x", path=tmp_path / "a")
        with pytest.raises(PayloadError):
            drive.put("a")

    def test_roundtrip_large_file(self, deta, service):
        drive = deta.drive("photos", chunk_size=1024)
        data = bytes(range(256)) * 20
        drive.put("blob.bin", data)
        assert drive.get("blob.bin") == data
        assert len(service.calls("POST", "/parts?")) == 5

    def test_aborted_upload_exposes_abort_response(self, deta, service):
        service.failing_parts = {1}
        drive = deta.drive("photos", chunk_size=4)

        with pytest.raises(UploadAbortedError) as exc_info:
            drive.put("doc.txt", b"abcdefgh")

        response = exc_info.value.response
        assert response["name"] == "doc.txt"
        assert response["upload_id"] == exc_info.value.details["upload_id"]
        assert "doc.txt" not in service.files["photos"]


class TestDelete:
    def test_delete_single_name(self, stocked_drive, service):
        result = stocked_drive.delete("readme.txt")
        assert result["deleted"] == ["readme.txt"]
        assert json.loads(service.calls("DELETE", "/files")[0].content) == {"names": ["readme.txt"]}

    def test_delete_many(self, stocked_drive, service):
        result = stocked_drive.delete(["2023/a.png", "missing.png"])
        assert result["deleted"] == ["2023/a.png"]
        assert "2023/a.png" not in service.files["photos"]

    def test_delete_too_many_sends_nothing(self, drive, service):
        with pytest.raises(PayloadError):
            drive.delete([f"f{i}" for i in range(MAX_DELETE_NAMES + 1)])
        assert service.requests == []

    def test_delete_nothing(self, drive, service):
        with pytest.raises(PayloadError):
            drive.delete([])
        assert service.requests == []
