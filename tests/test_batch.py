"""Tests for batch processing and report export."""

import json
import shutil
from pathlib import Path

from parsenode.batch import discover, process_file, process_paths, scan_file
from parsenode.config import PatcherConfig
from parsenode.errors import ParseError
from parsenode.export import report_to_dict, unified_diff, write_json_report
from parsenode.tracker import parse

FIXTURES_DIR = Path(__file__).parent / "fixtures"

BROKEN = b'<document><view id="v"><button id="b"></view></document>'


def copy_fixture(tmp_path: Path, name: str = "Main.storyboard") -> Path:
    target = tmp_path / name
    shutil.copy(FIXTURES_DIR / "Main.storyboard", target)
    return target


class TestDiscover:
    """Tests for document discovery."""

    def test_finds_storyboards_and_xibs(self, tmp_path):
        """Test nested documents are found and other files ignored."""
        (tmp_path / "App" / "Views").mkdir(parents=True)
        (tmp_path / "App" / "Main.storyboard").write_bytes(b"<document/>")
        (tmp_path / "App" / "Views" / "Cell.xib").write_bytes(b"<document/>")
        (tmp_path / "App" / "Info.plist").write_bytes(b"<plist/>")
        found = discover(tmp_path, PatcherConfig().patterns)
        assert found == [
            tmp_path / "App" / "Main.storyboard",
            tmp_path / "App" / "Views" / "Cell.xib",
        ]

    def test_file_root(self, tmp_path):
        """Test a file passed as root is returned as-is."""
        path = copy_fixture(tmp_path)
        assert discover(path, ["**/*.xib"]) == [path]

    def test_empty_directory(self, tmp_path):
        """Test nothing found yields an empty list."""
        assert discover(tmp_path, ["**/*.storyboard"]) == []


class TestProcessFile:
    """Tests for single-file processing."""

    def test_dry_run(self, tmp_path):
        """Test the default run plans but does not write."""
        path = copy_fixture(tmp_path)
        report = process_file(path)
        assert report.success
        assert len(report.records) == 5
        assert len(report.ops) == 4
        assert report.result.applied_count == 4
        assert not report.result.written
        assert path.read_bytes() == (FIXTURES_DIR / "Main.storyboard").read_bytes()
        assert "found 5 tracked elements; planned ops: 4" in str(report)

    def test_apply_in_place(self, tmp_path):
        """Test applying writes the document and a backup."""
        path = copy_fixture(tmp_path)
        report = process_file(path, apply=True)
        assert report.result.out_path == path
        assert report.result.backup_path.read_bytes() == report.original
        assert all(r.has_annotation for r in parse(path.read_bytes()))

    def test_second_apply_changes_nothing(self, tmp_path):
        """Test applying twice leaves the first result untouched."""
        path = copy_fixture(tmp_path)
        process_file(path, PatcherConfig(backup=False), apply=True)
        first = path.read_bytes()
        report = process_file(path, PatcherConfig(backup=False), apply=True)
        assert report.ops == []
        assert path.read_bytes() == first
        assert first.count(b"<accessibility") == 5

    def test_allowlist(self, tmp_path):
        """Test only allowlisted tags are patched."""
        path = copy_fixture(tmp_path)
        report = process_file(path, PatcherConfig(allowlist=frozenset({"button"})))
        assert [op.source_record.tag for op in report.ops] == ["button"]

    def test_out_path(self, tmp_path):
        """Test a separate output file."""
        path = copy_fixture(tmp_path)
        out = tmp_path / "Out.storyboard"
        report = process_file(path, PatcherConfig(backup=False), apply=True, out_path=out)
        assert out.read_bytes() == report.result.patched
        assert path.read_bytes() == report.original

    def test_parse_error_is_contained(self, tmp_path):
        """Test a malformed document is reported, not raised, and not written."""
        path = tmp_path / "Broken.storyboard"
        path.write_bytes(BROKEN)
        report = process_file(path, apply=True)
        assert not report.success
        assert isinstance(report.error, ParseError)
        assert report.ops == []
        assert path.read_bytes() == BROKEN
        assert not (tmp_path / "Broken.storyboard.bak").exists()

    def test_missing_file_is_contained(self, tmp_path):
        """Test an unreadable document is reported as a failure."""
        report = process_file(tmp_path / "Gone.xib")
        assert not report.success
        assert "Gone.xib" in str(report)


class TestScanFile:
    """Tests for parse-only scanning."""

    def test_records_without_plan(self, tmp_path):
        """Test scanning reports records and plans nothing."""
        path = copy_fixture(tmp_path)
        report = scan_file(path)
        assert report.success
        assert len(report.records) == 5
        assert report.ops == []
        assert report.result is None

    def test_allowlist(self, tmp_path):
        """Test the allowlist narrows scanned records."""
        path = copy_fixture(tmp_path)
        report = scan_file(path, PatcherConfig(allowlist=frozenset({"label", "button"})))
        assert [r.tag for r in report.records] == ["label", "button"]

    def test_parse_error_is_contained(self, tmp_path):
        """Test a malformed document is reported on the scan report."""
        path = tmp_path / "Broken.storyboard"
        path.write_bytes(BROKEN)
        report = scan_file(path)
        assert isinstance(report.error, ParseError)


class TestProcessPaths:
    """Tests for batches of documents."""

    def test_failure_does_not_stop_batch(self, tmp_path):
        """Test good files are processed after a bad one."""
        bad = tmp_path / "A.storyboard"
        bad.write_bytes(BROKEN)
        good = copy_fixture(tmp_path, "B.storyboard")
        batch = process_paths([bad, good], apply=True)
        assert [r.path for r in batch.failed] == [bad]
        assert [r.path for r in batch.succeeded] == [good]
        assert batch.total_applied == 4
        assert "2 files, 4 planned insertions, 1 failed" == str(batch)


class TestExport:
    """Tests for JSON reports and diffs."""

    def test_report_to_dict(self, tmp_path):
        """Test the report layout for failed and successful files."""
        bad = tmp_path / "A.storyboard"
        bad.write_bytes(BROKEN)
        good = copy_fixture(tmp_path, "B.storyboard")
        data = report_to_dict(process_paths([bad, good]))

        assert data["summary"] == {"files": 2, "failed": 1, "planned": 4, "applied": 4}
        failed, succeeded = data["files"]
        assert failed["file"] == str(bad)
        assert "XML parse error" in failed["error"]
        assert succeeded["tracked"] == 5
        assert succeeded["annotated"] == 1
        assert succeeded["outPath"] is None
        first = succeeded["ops"][0]
        assert first["tag"] == "label"
        assert first["startLine"] == 12
        assert first["text"].startswith("<accessibility")

    def test_write_json_report(self, tmp_path):
        """Test the written report is valid JSON."""
        good = copy_fixture(tmp_path)
        out = write_json_report(process_paths([good]), tmp_path / "report.json")
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["summary"]["planned"] == 4

    def test_unified_diff(self):
        """Test the diff shows only added annotation lines."""
        original = b'<scene>\n  <button id="ok">\n  </button>\n</scene>\n'
        report_diff = unified_diff(original, original.replace(b"  </b", b"  <x/>\n  </b"), "M.xib")
        added = [
            line
            for line in report_diff.splitlines()
            if line.startswith("+") and not line.startswith("+++")
        ]
        removed = [
            line
            for line in report_diff.splitlines()
            if line.startswith("-") and not line.startswith("---")
        ]
        assert added == ["+  <x/>"]
        assert removed == []
