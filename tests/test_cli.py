"""Tests for the command-line interface."""

import json
import shutil
from pathlib import Path

from typer.testing import CliRunner

from parsenode import __version__, applier
from parsenode.cli import app
from parsenode.errors import PatchVerificationError

runner = CliRunner()

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def create_project(tmp_path: Path) -> Path:
    """Create a project folder with one storyboard and one xib."""
    project = tmp_path / "App"
    (project / "Cells").mkdir(parents=True)
    shutil.copy(FIXTURES_DIR / "Main.storyboard", project / "Main.storyboard")
    (project / "Cells" / "Cell.xib").write_bytes(
        b'<document>\n    <tableViewCell id="cell-1">\n    </tableViewCell>\n</document>\n'
    )
    return project


class TestCLIVersion:
    """Tests for version flag."""

    def test_version_flag(self):
        """Test --version shows version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_version_short_flag(self):
        """Test -v shows version."""
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "parsenode version" in result.stdout


class TestCLIHelp:
    """Tests for help output."""

    def test_main_help(self):
        """Test main --help lists commands."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "scan" in result.stdout
        assert "patch" in result.stdout

    def test_patch_help(self):
        """Test patch --help shows options."""
        result = runner.invoke(app, ["patch", "--help"])
        assert result.exit_code == 0
        for option in ("--apply", "--out", "--report", "--prefix", "--allowlist"):
            assert option in result.stdout


class TestCLIScan:
    """Tests for scan command."""

    def test_scan_folder(self, tmp_path):
        """Test scan summarizes each document."""
        project = create_project(tmp_path)
        result = runner.invoke(app, ["scan", str(project)])
        assert result.exit_code == 0
        assert "5 tracked, 1 annotated, 4 missing" in result.stdout
        assert "1 tracked, 0 annotated, 1 missing" in result.stdout
        assert "<textField> lines 16-19 [annotated]" in result.stdout

    def test_scan_json(self, tmp_path):
        """Test --json prints machine-readable elements."""
        project = create_project(tmp_path)
        result = runner.invoke(app, ["scan", "--file", str(project / "Main.storyboard"), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [e["tag"] for e in data[0]["elements"]] == [
            "view",
            "label",
            "textField",
            "button",
            "imageView",
        ]

    def test_scan_skips_patch_verification(self, tmp_path, monkeypatch):
        """Test scan succeeds on a document whose patch would be rejected."""
        doc = tmp_path / "Root.xib"
        doc.write_bytes(b'<view id="v"/>\n')

        def reject(buffer, identity):
            raise PatchVerificationError(identity, "rejected")

        monkeypatch.setattr(applier, "verify_well_formed", reject)
        assert runner.invoke(app, ["patch", "--file", str(doc)]).exit_code == 1
        result = runner.invoke(app, ["scan", "--file", str(doc)])
        assert result.exit_code == 0
        assert "1 tracked, 0 annotated, 1 missing" in result.stdout

    def test_scan_allowlist(self, tmp_path):
        """Test --allowlist narrows the scanned tags."""
        project = create_project(tmp_path)
        result = runner.invoke(
            app, ["scan", "--file", str(project / "Main.storyboard"), "--allowlist", "button"]
        )
        assert result.exit_code == 0
        assert "1 tracked, 0 annotated, 1 missing" in result.stdout
        assert "<label>" not in result.stdout

    def test_scan_verbose(self, tmp_path):
        """Test --verbose is accepted by scan."""
        project = create_project(tmp_path)
        result = runner.invoke(app, ["scan", str(project), "--verbose"])
        assert result.exit_code == 0

    def test_scan_never_writes(self, tmp_path):
        """Test scan leaves documents untouched."""
        project = create_project(tmp_path)
        before = (project / "Main.storyboard").read_bytes()
        runner.invoke(app, ["scan", str(project)])
        assert (project / "Main.storyboard").read_bytes() == before
        assert not (project / "Main.storyboard.bak").exists()


class TestCLIPatch:
    """Tests for patch command."""

    def test_dry_run_by_default(self, tmp_path):
        """Test patch without --apply writes nothing."""
        project = create_project(tmp_path)
        before = (project / "Main.storyboard").read_bytes()
        result = runner.invoke(app, ["patch", str(project)])
        assert result.exit_code == 0
        assert "Dry run: 2 files, 5 planned insertions" in result.stdout
        assert "button lines 20-26 [id]" in result.stdout
        assert (project / "Main.storyboard").read_bytes() == before

    def test_apply(self, tmp_path):
        """Test --apply patches files in place and keeps backups."""
        project = create_project(tmp_path)
        result = runner.invoke(app, ["patch", str(project), "--apply"])
        assert result.exit_code == 0
        cell = (project / "Cells" / "Cell.xib").read_bytes()
        assert b'identifier="cell_cell-1"' in cell
        assert (project / "Cells" / "Cell.xib.bak").exists()
        assert (project / "Main.storyboard.bak").exists()

    def test_apply_no_backup_with_prefix(self, tmp_path):
        """Test --no-backup and --prefix."""
        project = create_project(tmp_path)
        xib = project / "Cells" / "Cell.xib"
        result = runner.invoke(
            app, ["patch", "--file", str(xib), "--apply", "--no-backup", "--prefix", "shop"]
        )
        assert result.exit_code == 0
        assert b'identifier="shop_cell_cell-1"' in xib.read_bytes()
        assert not (project / "Cells" / "Cell.xib.bak").exists()

    def test_out_requires_file(self, tmp_path):
        """Test --out is rejected in folder mode."""
        project = create_project(tmp_path)
        result = runner.invoke(app, ["patch", str(project), "--out", str(tmp_path / "x.xib")])
        assert result.exit_code == 1
        assert "--out requires --file" in result.output

    def test_out_with_file(self, tmp_path):
        """Test --out writes the patched document elsewhere."""
        project = create_project(tmp_path)
        xib = project / "Cells" / "Cell.xib"
        out = tmp_path / "Patched.xib"
        result = runner.invoke(app, ["patch", "--file", str(xib), "--apply", "--out", str(out)])
        assert result.exit_code == 0
        assert b"<accessibility" in out.read_bytes()
        assert b"<accessibility" not in xib.read_bytes()

    def test_report_and_diff(self, tmp_path):
        """Test --report writes JSON and --diff prints added lines."""
        project = create_project(tmp_path)
        report = tmp_path / "report.json"
        xib = project / "Cells" / "Cell.xib"
        result = runner.invoke(app, ["patch", "--file", str(xib), "--diff", "--report", str(report)])
        assert result.exit_code == 0
        assert "+    <accessibility" in result.stdout
        data = json.loads(report.read_text(encoding="utf-8"))
        assert data["summary"]["planned"] == 1

    def test_allowlist(self, tmp_path):
        """Test --allowlist restricts tracked tags."""
        project = create_project(tmp_path)
        result = runner.invoke(
            app,
            ["patch", "--file", str(project / "Main.storyboard"), "--allowlist", "button,label"],
        )
        assert result.exit_code == 0
        assert "planned ops: 2" in result.stdout

    def test_config_file(self, tmp_path):
        """Test settings are read from --config."""
        project = create_project(tmp_path)
        config = tmp_path / "parsenode.yaml"
        config.write_text("prefix: cfg\nbackup: false\n", encoding="utf-8")
        xib = project / "Cells" / "Cell.xib"
        args = ["patch", "--file", str(xib), "--apply", "--config", str(config)]
        result = runner.invoke(app, args)
        assert result.exit_code == 0
        assert b'identifier="cfg_cell_cell-1"' in xib.read_bytes()
        assert not (project / "Cells" / "Cell.xib.bak").exists()

    def test_bad_config_file(self, tmp_path):
        """Test an invalid config aborts with exit code 1."""
        config = tmp_path / "parsenode.yaml"
        config.write_text("nonsense: 1\n", encoding="utf-8")
        result = runner.invoke(app, ["patch", str(tmp_path), "--config", str(config)])
        assert result.exit_code == 1
        assert "nonsense" in result.output

    def test_malformed_file_reported_and_batch_continues(self, tmp_path):
        """Test a broken document fails alone and sets exit code 1."""
        project = create_project(tmp_path)
        broken = project / "Broken.storyboard"
        broken.write_bytes(b"<document><view></document>")
        result = runner.invoke(app, ["patch", str(project), "--apply"])
        assert result.exit_code == 1
        assert "Error processing" in result.output
        assert "Broken.storyboard" in result.output
        assert broken.read_bytes() == b"<document><view></document>"
        assert b"<accessibility" in (project / "Cells" / "Cell.xib").read_bytes()
