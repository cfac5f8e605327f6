"""
Tests for the best-effort file downloader.
"""

import asyncio
import threading

import pytest

from conftest import BASE_URL, FakePage
from intra_mirror import downloader
from intra_mirror.downloader import (
    DownloadTask,
    FileDownloader,
    is_excluded,
    plan_downloads,
    write_atomic,
)
from intra_mirror.errors import FileWriteFailure
from intra_mirror.monitor import StatsAggregator
from intra_mirror.session import FileEntry


def _load(session, site, files):
    site.pages["page"] = FakePage(file_entries=files)
    asyncio.run(session.navigate("page", 1000))


class TestExclusion:

    @pytest.mark.parametrize("name", [
        "subject-dyslexic.pdf", "Subject DYSLEXIC.pdf", "OpenDyslexic font.pdf",
    ])
    def test_excluded(self, name):
        assert is_excluded(name)

    def test_regular_name_kept(self):
        assert not is_excluded("subject.pdf")

    def test_plan_drops_excluded_and_empty(self, tmp_path):
        entries = [
            FileEntry("subject.pdf", "l1"),
            FileEntry("subject-Dyslexic.pdf", "l2"),
            FileEntry("", "l3"),
            FileEntry("nolink.txt", ""),
        ]
        tasks = plan_downloads(entries, tmp_path)
        assert tasks == [DownloadTask("l1", tmp_path / "subject.pdf")]

    def test_plan_checks_full_listed_name(self, tmp_path):
        entries = [
            FileEntry("Dyslexic version/subject.pdf", "l1"),
            FileEntry("dyslexic\\notes.txt", "l2"),
            FileEntry("handouts/notes.txt", "l3"),
        ]
        tasks = plan_downloads(entries, tmp_path)
        assert tasks == [DownloadTask("l3", tmp_path / "notes.txt")]

    def test_excluded_entry_never_fetched(self, site, session, tmp_path):
        _load(session, site, [
            FileEntry("a.pdf", BASE_URL + "/a"),
            FileEntry("a-dyslexic.pdf", BASE_URL + "/a-dys"),
        ])
        site.files.update({BASE_URL + "/a": b"a", BASE_URL + "/a-dys": b"d"})

        asyncio.run(FileDownloader(StatsAggregator()).download_all(session, tmp_path))

        assert site.fetches == [BASE_URL + "/a"]
        assert not (tmp_path / "a-dyslexic.pdf").exists()


class TestDownload:

    def test_success_writes_and_counts(self, site, session, tmp_path):
        _load(session, site, [
            FileEntry("main.c", BASE_URL + "/1"),
            FileEntry("README", BASE_URL + "/2"),
        ])
        site.files.update({BASE_URL + "/1": b"int main;", BASE_URL + "/2": b"hi"})
        stats = StatsAggregator()

        results = asyncio.run(FileDownloader(stats).download_all(session, tmp_path))

        assert all(r.ok for r in results)
        assert (tmp_path / "main.c").read_bytes() == b"int main;"
        snap = asyncio.run(stats.snapshot())
        assert snap.file_count == 2
        assert snap.extension_histogram == {".c": 1, "(no ext)": 1}

    def test_fetch_failure_dropped_silently(self, site, session, tmp_path):
        _load(session, site, [
            FileEntry("missing.pdf", BASE_URL + "/404"),
            FileEntry("ok.pdf", BASE_URL + "/ok"),
        ])
        site.files[BASE_URL + "/ok"] = b"ok"
        stats = StatsAggregator()

        results = asyncio.run(FileDownloader(stats).download_all(session, tmp_path))

        assert [r.ok for r in results] == [False, True]
        assert not (tmp_path / "missing.pdf").exists()
        assert asyncio.run(stats.snapshot()).file_count == 1

    def test_write_failure_reported_not_raised(self, site, session, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        site.files[BASE_URL + "/x"] = b"x"
        stats = StatsAggregator()
        task = DownloadTask(BASE_URL + "/x", blocker / "x.txt")

        result = asyncio.run(FileDownloader(stats).download(session, task))

        assert not result.ok
        assert isinstance(result.error, FileWriteFailure)
        assert asyncio.run(stats.snapshot()).file_count == 0

    def test_progress_emitted_per_file(self, site, session, tmp_path):
        seen = []
        stats = StatsAggregator(progress_callback=lambda s: seen.append(s.file_count))
        _load(session, site, [FileEntry("a.txt", BASE_URL + "/a"), FileEntry("b.txt", BASE_URL + "/b")])
        site.files.update({BASE_URL + "/a": b"a", BASE_URL + "/b": b"b"})

        asyncio.run(FileDownloader(stats).download_all(session, tmp_path))

        assert seen == [1, 2]

    def test_write_runs_off_event_loop_thread(self, site, session, tmp_path, monkeypatch):
        write_threads = []

        def recording_write(path, data):
            write_threads.append(threading.get_ident())
            write_atomic(path, data)

        monkeypatch.setattr(downloader, "write_atomic", recording_write)
        site.files[BASE_URL + "/big"] = b"x" * 1024
        task = DownloadTask(BASE_URL + "/big", tmp_path / "big.bin")

        async def go():
            loop_thread = threading.get_ident()
            result = await FileDownloader(StatsAggregator()).download(session, task)
            return loop_thread, result

        loop_thread, result = asyncio.run(go())

        assert result.ok
        assert (tmp_path / "big.bin").read_bytes() == b"x" * 1024
        assert len(write_threads) == 1
        assert write_threads[0] != loop_thread


class TestWriteAtomic:

    def test_no_temp_files_left(self, tmp_path):
        target = tmp_path / "sub" / "file.bin"
        write_atomic(target, b"\x00\x01")
        assert target.read_bytes() == b"\x00\x01"
        assert [p.name for p in target.parent.iterdir()] == ["file.bin"]

    def test_overwrites_existing(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_bytes(b"old")
        write_atomic(target, b"new")
        assert target.read_bytes() == b"new"
