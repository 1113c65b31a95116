import json
import os
import sys
import threading
from datetime import datetime, timezone

import pytest
import requests
import responses
from responses import matchers

from fortrust.download import (
    DownloadEntry,
    DownloadManager,
    DownloadState,
    DownloadStatus,
    default_download_dir,
)

URL = "https://files.example.com/file.bin"
KEY = "chrome.downloads.state"


def _entry(download_id, status, downloaded=0, save_path="/x/file.bin"):
    return DownloadEntry(
        id=download_id,
        url=URL,
        filename="file.bin",
        save_path=save_path,
        downloaded_bytes=downloaded,
        status=status,
        created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )


def test_entry_round_trip():
    entry = _entry(3, DownloadStatus(DownloadState.FAILED, "HTTP error: boom"), downloaded=7)
    again = DownloadEntry.from_dict(json.loads(json.dumps(entry.to_dict())))
    assert again == entry


def test_status_json_forms():
    assert _entry(1, DownloadStatus(DownloadState.QUEUED)).to_dict()["status"] == "Queued"
    failed = _entry(1, DownloadStatus(DownloadState.FAILED, "File write error"))
    assert failed.to_dict()["status"] == {"Failed": "File write error"}


def test_from_dict_accepts_nanosecond_timestamps():
    data = _entry(1, DownloadStatus(DownloadState.PAUSED)).to_dict()
    data["created_at"] = "2024-01-02T03:04:05.123456789Z"
    entry = DownloadEntry.from_dict(data)
    assert entry.created_at.microsecond == 123456


def test_from_dict_rejects_missing_field():
    data = _entry(1, DownloadStatus(DownloadState.PAUSED)).to_dict()
    del data["url"]
    with pytest.raises(ValueError):
        DownloadEntry.from_dict(data)


def test_load_state_pauses_entries_and_sets_next_id():
    settings = {
        KEY: json.dumps(
            [
                _entry(5, DownloadStatus(DownloadState.DOWNLOADING)).to_dict(),
                _entry(2, DownloadStatus(DownloadState.QUEUED)).to_dict(),
            ]
        )
    }
    manager = DownloadManager()
    manager.load_state(settings)
    entries = manager.all_downloads()
    assert [e.id for e in entries] == [5, 2]
    assert all(e.status.state is DownloadState.PAUSED for e in entries)
    assert all(e.speed_bytes_per_sec == 0.0 for e in entries)

    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=b"", headers={"Content-Length": "0"})
        new_id = manager.start_download(URL, "new.bin", "/nonexistent-dir-for-test")
        manager.wait(new_id, timeout=5)
    assert new_id == 6


def test_load_state_ignores_bad_json():
    manager = DownloadManager()
    manager.load_state({KEY: "not json"})
    manager.load_state({})
    assert manager.all_downloads() == []


def test_save_state_keeps_only_unfinished():
    source = DownloadManager()
    source.load_state(
        {KEY: json.dumps([_entry(1, DownloadStatus(DownloadState.QUEUED)).to_dict()])}
    )
    settings = {}
    source.save_state(settings)
    restored = DownloadManager()
    restored.load_state(settings)
    assert [e.id for e in restored.all_downloads()] == [1]


def test_save_state_without_active_leaves_settings_alone():
    settings = {}
    DownloadManager().save_state(settings)
    assert settings == {}


def test_completed_download(tmp_path):
    manager = DownloadManager()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=b"hello world", headers={"Content-Length": "11"})
        download_id = manager.start_download(URL, "f.bin", str(tmp_path))
        entry = manager.wait(download_id, timeout=5)
    assert entry.status == DownloadStatus(DownloadState.COMPLETED)
    assert entry.total_bytes == 11
    assert entry.downloaded_bytes == 11
    assert entry.save_path == os.path.join(str(tmp_path), "f.bin")
    assert (tmp_path / "f.bin").read_bytes() == b"hello world"


def test_resume_completed_is_noop(tmp_path):
    manager = DownloadManager()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=b"abc", headers={"Content-Length": "3"})
        download_id = manager.start_download(URL, "f.bin", str(tmp_path))
        manager.wait(download_id, timeout=5)
        manager.resume_download(download_id, str(tmp_path))
        assert len(rsps.calls) == 1
    assert manager.entry_by_id(download_id).status.state is DownloadState.COMPLETED


def test_resume_sends_range_and_appends(tmp_path):
    (tmp_path / "file.bin").write_bytes(b"abc")
    manager = DownloadManager()
    manager.load_state(
        {KEY: json.dumps([_entry(1, DownloadStatus(DownloadState.DOWNLOADING), downloaded=3).to_dict()])}
    )
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.GET,
            URL,
            body=b"defg",
            status=206,
            headers={"Content-Length": "4"},
            match=[matchers.header_matcher({"Range": "bytes=3-"})],
        )
        manager.resume_all_paused(str(tmp_path))
        entry = manager.wait(1, timeout=5)
    assert entry.status.state is DownloadState.COMPLETED
    assert entry.total_bytes == 7
    assert entry.downloaded_bytes == 7
    assert (tmp_path / "file.bin").read_bytes() == b"abcdefg"


def test_connection_error_fails(tmp_path):
    manager = DownloadManager()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=requests.ConnectionError("boom"))
        download_id = manager.start_download(URL, "f.bin", str(tmp_path))
        entry = manager.wait(download_id, timeout=5)
    assert entry.status.state is DownloadState.FAILED
    assert entry.status.error.startswith("HTTP error:")


def test_unopenable_file_fails(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    manager = DownloadManager()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=b"abc", headers={"Content-Length": "3"})
        download_id = manager.start_download(URL, "f.bin", str(blocker))
        entry = manager.wait(download_id, timeout=5)
    assert entry.status.state is DownloadState.FAILED
    assert entry.status.error.startswith("Cannot open file:")


def test_pause_while_queued_and_wait_timeout(tmp_path):
    release = threading.Event()

    def slow(request):
        release.wait(5)
        return (200, {"Content-Length": "4"}, b"data")

    manager = DownloadManager()
    with responses.RequestsMock() as rsps:
        rsps.add_callback(responses.GET, URL, callback=slow)
        download_id = manager.start_download(URL, "f.bin", str(tmp_path))
        manager.pause_download(download_id)
        assert manager.entry_by_id(download_id).status.state is DownloadState.PAUSED
        with pytest.raises(TimeoutError):
            manager.wait(download_id, timeout=0.05)
        release.set()
        entry = manager.wait(download_id, timeout=5)
    assert entry.status.state is DownloadState.PAUSED
    assert entry.downloaded_bytes == 0


def test_remove_download(tmp_path):
    manager = DownloadManager()
    manager.load_state(
        {KEY: json.dumps([_entry(4, DownloadStatus(DownloadState.PAUSED)).to_dict()])}
    )
    manager.remove_download(4)
    assert manager.entry_by_id(4) is None
    assert manager.all_downloads() == []


def test_default_download_dir_unix(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("HOME", "/home/someone")
    assert default_download_dir() == "/home/someone/Downloads"
    monkeypatch.delenv("HOME")
    assert default_download_dir() == "/tmp"


def test_default_download_dir_windows(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.delenv("USERPROFILE", raising=False)
    assert default_download_dir() == "C:\\Downloads"
    monkeypatch.setenv("USERPROFILE", "C:\\Users\\someone")
    assert default_download_dir() == "C:\\Users\\someone\\Downloads"