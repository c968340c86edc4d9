"""Tests for resolving hit sources to managed files."""

import pytest

from conftest import STORAGE_DIR, CountingFileLookup, make_hit
from knowledge.models import ResolvedHit
from knowledge.sources import extract_file_id, get_file_from_url, get_knowledge_source_url


class FailingLookup:
    async def get_file(self, file_id):
        raise ConnectionError("storage offline")


# ── File id extraction ────────────────────────────────

class TestExtractFileId:
    def test_posix_path(self):
        assert extract_file_id(f"{STORAGE_DIR}/f3a9c2.pdf") == "f3a9c2"

    def test_windows_path(self):
        source = "C:\\Users\\me\\AppData\\Roaming\\CherryStudio\\Data\\Files\\f3a9c2.tar.gz"
        assert extract_file_id(source) == "f3a9c2"

    def test_without_anchor(self):
        assert extract_file_id("/home/user/Data/Files/f3a9c2.pdf") is None

    def test_without_files_dir(self):
        assert extract_file_id("/home/user/.config/CherryStudio/notes/a.md") is None

    def test_files_dir_without_name(self):
        assert extract_file_id("/home/user/.config/CherryStudio/Data/Files") is None

    def test_empty(self):
        assert extract_file_id("") is None
        assert extract_file_id(None) is None

    def test_custom_anchor(self):
        assert extract_file_id("/srv/MyApp/Data/Files/abc.txt", anchor="MyApp") == "abc"


# ── File lookup ───────────────────────────────────────

class TestGetFileFromUrl:
    @pytest.mark.asyncio
    async def test_resolves_stored_file(self, file_lookup, stored_file):
        record = await get_file_from_url(stored_file.path, file_lookup)
        assert record == stored_file
        assert file_lookup.requested == ["f3a9c2"]

    @pytest.mark.asyncio
    async def test_unknown_file(self, file_lookup):
        record = await get_file_from_url(f"{STORAGE_DIR}/missing.pdf", file_lookup)
        assert record is None
        assert file_lookup.requested == ["missing"]

    @pytest.mark.asyncio
    async def test_outside_storage_skips_lookup(self, file_lookup):
        assert await get_file_from_url("https://example.com/page", file_lookup) is None
        assert await get_file_from_url("/tmp/notes.txt", file_lookup) is None
        assert file_lookup.requested == []

    @pytest.mark.asyncio
    async def test_failing_lookup_yields_none(self):
        assert await get_file_from_url(f"{STORAGE_DIR}/f3a9c2.pdf", FailingLookup()) is None


# ── Source URL ────────────────────────────────────────

class TestKnowledgeSourceUrl:
    def test_remote_source_wins(self, stored_file):
        item = ResolvedHit(hit=make_hit("x", source="https://example.com/a"), file=stored_file)
        assert get_knowledge_source_url(item) == "https://example.com/a"

    def test_local_file_link(self, stored_file):
        item = ResolvedHit(hit=make_hit("x", source=stored_file.path), file=stored_file)
        assert get_knowledge_source_url(item) == "[Quarterly Report.pdf](http://file/f3a9c2.pdf)"

    def test_raw_source(self):
        item = ResolvedHit(hit=make_hit("x", source="/tmp/notes.txt"))
        assert get_knowledge_source_url(item) == "/tmp/notes.txt"

    def test_missing_source(self):
        item = ResolvedHit(hit=make_hit("x"))
        assert get_knowledge_source_url(item) == ""
