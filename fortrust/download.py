"""Background file downloads with pause, resume and persisted state."""

from __future__ import annotations

import json
import os
import re
import sys
import threading
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, MutableMapping, Optional

import requests

STATE_KEY = "chrome.downloads.state"
_REQUEST_TIMEOUT = 600.0
_CHUNK_SIZE = 65536
_SESSION_LIMIT = 1024 * 1024 * 1024
_PROGRESS_INTERVAL = 0.5

_RECOVERABLE_ERRORS = (
    requests.exceptions.Timeout,
    requests.exceptions.ConnectionError,
    requests.exceptions.ChunkedEncodingError,
)


class DownloadState(Enum):
    QUEUED = "Queued"
    DOWNLOADING = "Downloading"
    PAUSED = "Paused"
    COMPLETED = "Completed"
    FAILED = "Failed"


@dataclass(frozen=True)
class DownloadStatus:
    """Where a download stands; failures carry a message."""

    state: DownloadState
    error: Optional[str] = None

    def to_json(self) -> Any:
        if self.state is DownloadState.FAILED:
            return {"Failed": self.error or ""}
        return self.state.value

    @classmethod
    def from_json(cls, data: Any) -> "DownloadStatus":
        if isinstance(data, str):
            state = DownloadState(data)
            if state is DownloadState.FAILED:
                raise ValueError("a failed status needs a message")
            return cls(state)
        if isinstance(data, dict) and set(data) == {"Failed"} and isinstance(data["Failed"], str):
            return cls(DownloadState.FAILED, data["Failed"])
        raise ValueError(f"invalid download status: {data!r}")


_QUEUED = DownloadStatus(DownloadState.QUEUED)
_DOWNLOADING = DownloadStatus(DownloadState.DOWNLOADING)
_PAUSED = DownloadStatus(DownloadState.PAUSED)
_COMPLETED = DownloadStatus(DownloadState.COMPLETED)


def _failed(message: str) -> DownloadStatus:
    return DownloadStatus(DownloadState.FAILED, message)


def _format_time(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


_TIME_RE = re.compile(r"^(?P<base>[^.]+?)(?:\.(?P<frac>\d+))?(?P<tz>Z|[+-]\d{2}:\d{2})$")


def _parse_time(text: str) -> datetime:
    if not isinstance(text, str):
        raise ValueError(f"invalid timestamp: {text!r}")
    match = _TIME_RE.match(text.strip())
    if match is None:
        raise ValueError(f"invalid timestamp: {text!r}")
    frac = match.group("frac")
    tz = match.group("tz")
    normalized = match.group("base")
    if frac:
        normalized += "." + frac[:6].ljust(6, "0")
    normalized += "+00:00" if tz == "Z" else tz
    return datetime.fromisoformat(normalized).astimezone(timezone.utc)


def _uint(data: dict, key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{key}: expected a non-negative integer")
    return value


def _text(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"{key}: expected a string")
    return value


@dataclass
class DownloadEntry:
    id: int
    url: str
    filename: str
    save_path: str
    total_bytes: int = 0
    downloaded_bytes: int = 0
    status: DownloadStatus = _QUEUED
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    speed_bytes_per_sec: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form of the entry."""
        return {
            "id": self.id,
            "url": self.url,
            "filename": self.filename,
            "save_path": self.save_path,
            "total_bytes": self.total_bytes,
            "downloaded_bytes": self.downloaded_bytes,
            "status": self.status.to_json(),
            "created_at": _format_time(self.created_at),
            "speed_bytes_per_sec": self.speed_bytes_per_sec,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DownloadEntry":
        """Rebuild an entry from its dict form; every field must be present."""
        if not isinstance(data, dict):
            raise ValueError("expected a mapping")
        try:
            speed = data["speed_bytes_per_sec"]
            if isinstance(speed, bool) or not isinstance(speed, (int, float)):
                raise ValueError("speed_bytes_per_sec: expected a number")
            return cls(
                id=_uint(data, "id"),
                url=_text(data, "url"),
                filename=_text(data, "filename"),
                save_path=_text(data, "save_path"),
                total_bytes=_uint(data, "total_bytes"),
                downloaded_bytes=_uint(data, "downloaded_bytes"),
                status=DownloadStatus.from_json(data["status"]),
                created_at=_parse_time(data["created_at"]),
                speed_bytes_per_sec=float(speed),
            )
        except KeyError as exc:
            raise ValueError(f"missing field {exc.args[0]!r}") from None


@dataclass
class _Handle:
    download_id: int
    cancel: threading.Event
    thread: Optional[threading.Thread] = None


class DownloadManager:
    """Runs downloads on background threads and tracks their progress."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._next_id = 1
        self._entries: list[DownloadEntry] = []
        self._handles: list[_Handle] = []

    def _find(self, download_id: int) -> Optional[DownloadEntry]:
        return next((e for e in self._entries if e.id == download_id), None)

    def _update(self, download_id: int, **changes: Any) -> None:
        with self._lock:
            entry = self._find(download_id)
            if entry is not None:
                for name, value in changes.items():
                    setattr(entry, name, value)

    def save_state(self, settings: MutableMapping[str, str]) -> None:
        """Store unfinished downloads in ``settings`` as JSON."""
        with self._lock:
            active = [
                e.to_dict()
                for e in self._entries
                if e.status.state
                in (DownloadState.DOWNLOADING, DownloadState.PAUSED, DownloadState.QUEUED)
            ]
        if not active:
            return
        settings[STATE_KEY] = json.dumps(active)

    def load_state(self, settings: MutableMapping[str, str]) -> None:
        """Restore downloads saved by :meth:`save_state`, all paused."""
        raw = settings.get(STATE_KEY)
        if not isinstance(raw, str):
            return
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                return
            entries = [DownloadEntry.from_dict(item) for item in data]
        except ValueError:
            return
        for entry in entries:
            entry.status = _PAUSED
            entry.speed_bytes_per_sec = 0.0
        max_id = max((e.id for e in entries), default=0)
        with self._lock:
            self._next_id = max_id + 1
            self._entries.extend(entries)

    def resume_all_paused(self, save_dir: str) -> None:
        with self._lock:
            ids = [e.id for e in self._entries if e.status.state is DownloadState.PAUSED]
        for download_id in ids:
            self.resume_download(download_id, save_dir)

    def start_download(
        self,
        url: str,
        filename: str,
        save_dir: str,
        existing_id: Optional[int] = None,
    ) -> int:
        """Start (or restart ``existing_id``) a download; returns its id."""
        save_path = os.path.join(save_dir.rstrip("\\/"), filename)
        cancel = threading.Event()
        with self._lock:
            if existing_id is None:
                download_id = self._next_id
                self._next_id += 1
                self._entries.append(
                    DownloadEntry(id=download_id, url=url, filename=filename, save_path=save_path)
                )
            else:
                download_id = existing_id
                entry = self._find(download_id)
                if entry is not None:
                    entry.status = _QUEUED
                    entry.speed_bytes_per_sec = 0.0
            handle = _Handle(download_id, cancel)
            self._handles.append(handle)
        thread = threading.Thread(
            target=self._run,
            args=(download_id, url, save_path, cancel),
            daemon=True,
        )
        handle.thread = thread
        thread.start()
        return download_id

    def wait(self, download_id: int, timeout: Optional[float] = None) -> Optional[DownloadEntry]:
        """Block until the download's worker stops; return its entry.

        Raises TimeoutError if the worker is still running after ``timeout``.
        """
        with self._lock:
            handles = [h for h in self._handles if h.download_id == download_id]
        for handle in handles:
            if handle.thread is not None:
                handle.thread.join(timeout)
                if handle.thread.is_alive():
                    raise TimeoutError(f"download {download_id} still running")
        return self.entry_by_id(download_id)

    def _run(self, download_id: int, url: str, save_path: str, cancel: threading.Event) -> None:
        with self._lock:
            entry = self._find(download_id)
            downloaded = entry.downloaded_bytes if entry is not None else 0

        headers = {"Range": f"bytes={downloaded}-"} if downloaded > 0 else {}
        try:
            response = requests.get(url, headers=headers, stream=True, timeout=_REQUEST_TIMEOUT)
        except requests.RequestException as exc:
            self._update(
                download_id,
                status=_failed(f"HTTP error: {exc}"),
                downloaded_bytes=downloaded,
            )
            return

        with response:
            length_header = response.headers.get("Content-Length")
            content_length = int(length_header) if length_header and length_header.isdigit() else None
            if response.status_code == 206:
                total = downloaded + content_length if content_length is not None else downloaded
            else:
                total = content_length or 0
            self._update(download_id, total_bytes=total, status=_DOWNLOADING)

            parent = os.path.dirname(save_path)
            if parent:
                try:
                    os.makedirs(parent, exist_ok=True)
                except OSError:
                    pass
            try:
                file = open(save_path, "ab" if downloaded > 0 else "wb")
            except OSError as exc:
                self._update(download_id, status=_failed(f"Cannot open file: {exc}"))
                return

            with file:
                self._copy(download_id, response, file, downloaded, cancel)

    def _copy(self, download_id, response, file, downloaded, cancel) -> None:
        dl = downloaded
        last_update = time.monotonic()
        last_bytes = dl
        remaining = _SESSION_LIMIT
        chunks = response.iter_content(chunk_size=_CHUNK_SIZE)
        while True:
            if cancel.is_set():
                self._update(download_id, status=_PAUSED, downloaded_bytes=dl)
                return
            if remaining <= 0:
                break
            try:
                chunk = next(chunks, None)
            except _RECOVERABLE_ERRORS:
                self._update(download_id, status=_PAUSED, downloaded_bytes=dl)
                return
            except requests.RequestException as exc:
                self._update(
                    download_id, status=_failed(f"Read error: {exc}"), downloaded_bytes=dl
                )
                return
            if chunk is None:
                break
            if not chunk:
                continue
            chunk = chunk[:remaining]
            remaining -= len(chunk)
            try:
                file.write(chunk)
            except OSError:
                self._update(download_id, status=_failed("File write error"))
                return
            dl += len(chunk)

            now = time.monotonic()
            elapsed = now - last_update
            if elapsed >= _PROGRESS_INTERVAL:
                speed = (dl - last_bytes) / elapsed
                last_bytes = dl
                last_update = now
                self._update(download_id, downloaded_bytes=dl, speed_bytes_per_sec=speed)

        with self._lock:
            entry = self._find(download_id)
            if entry is not None:
                entry.downloaded_bytes = dl
                if entry.status == _DOWNLOADING:
                    entry.status = _COMPLETED

    def pause_download(self, download_id: int) -> None:
        with self._lock:
            handle = next((h for h in self._handles if h.download_id == download_id), None)
            if handle is not None:
                handle.cancel.set()
            entry = self._find(download_id)
            if entry is not None and entry.status.state in (
                DownloadState.DOWNLOADING,
                DownloadState.QUEUED,
            ):
                entry.status = _PAUSED

    def resume_download(self, download_id: int, save_dir: str) -> None:
        """Restart a paused or failed download from where it stopped."""
        with self._lock:
            entry = self._find(download_id)
            if entry is None or entry.status.state not in (
                DownloadState.PAUSED,
                DownloadState.FAILED,
            ):
                return
            url, filename = entry.url, entry.filename
            self._handles = [h for h in self._handles if h.download_id != download_id]
        self.start_download(url, filename, save_dir, download_id)

    def remove_download(self, download_id: int) -> None:
        with self._lock:
            handle = next((h for h in self._handles if h.download_id == download_id), None)
            if handle is not None:
                handle.cancel.set()
            self._handles = [h for h in self._handles if h.download_id != download_id]
            self._entries = [e for e in self._entries if e.id != download_id]

    def all_downloads(self) -> list[DownloadEntry]:
        with self._lock:
            return [replace(e) for e in self._entries]

    def entry_by_id(self, download_id: int) -> Optional[DownloadEntry]:
        with self._lock:
            entry = self._find(download_id)
            return replace(entry) if entry is not None else None


def default_download_dir() -> str:
    """The user's Downloads folder, or a fallback when the home is unknown."""
    if sys.platform == "win32":
        profile = os.environ.get("USERPROFILE")
        return f"{profile}\\Downloads" if profile is not None else "C:\\Downloads"
    home = os.environ.get("HOME")
    return f"{home}/Downloads" if home is not None else "/tmp"