"""Tests for the CLI module."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from md2print import __version__
from md2print.cli import main

FIXTURE_DIR = Path(__file__).parent / "fixtures"
SAMPLE_MD = FIXTURE_DIR / "sample.md"
VAULT_DIR = FIXTURE_DIR / "vault"


class TestCLIMain:
    """Test the main() entry point."""

    def test_missing_input(self):
        with pytest.raises(SystemExit):
            main([])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_file_not_found(self, capsys):
        ret = main(["nonexistent.md"])
        assert ret == 1
        err = capsys.readouterr().err
        assert "not found" in err

    def test_convert_sample(self, tmp_path, capsys):
        out = tmp_path / "output.html"
        ret = main([str(SAMPLE_MD), "-o", str(out)])
        assert ret == 0
        assert out.exists()
        assert out.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")
        assert "Converted:" in capsys.readouterr().out

    def test_stdout_output(self, capsys):
        ret = main([str(SAMPLE_MD), "-o", "-"])
        assert ret == 0
        out = capsys.readouterr().out
        assert out.startswith("<!DOCTYPE html>")
        assert "Converted:" not in out

    def test_verbose_flag(self, tmp_path, capsys):
        out = tmp_path / "output.html"
        ret = main([str(SAMPLE_MD), "-o", str(out), "-v"])
        assert ret == 0
        err = capsys.readouterr().err
        assert "Input:" in err
        assert "Output:" in err
        assert "Done." in err

    def test_default_output_name(self, tmp_path, capsys):
        md_file = tmp_path / "myfile.md"
        md_file.write_text("# Test", encoding="utf-8")
        ret = main([str(md_file)])
        assert ret == 0
        expected = tmp_path / "myfile.html"
        assert expected.exists()

    def test_page_options(self, tmp_path, capsys):
        out = tmp_path / "output.html"
        ret = main([
            str(SAMPLE_MD), "-o", str(out),
            "--theme", "dark",
            "--font-size", "12",
            "--zoom-factor", "0.8",
            "--mono-font", "Iosevka",
            "--h1-weight", "600",
            "--h2-weight", "500",
        ])
        assert ret == 0
        html = out.read_text(encoding="utf-8")
        assert '<body class="theme-dark' in html
        assert "--font-text-size: 12px;" in html
        assert "--zoom-factor: 0.8;" in html
        assert "Iosevka" in html
        assert "--h1-weight: 600; --h2-weight: 500;" in html

    def test_invalid_theme(self):
        with pytest.raises(SystemExit):
            main([str(SAMPLE_MD), "--theme", "sepia"])


class TestCLIVault:
    """Test vault handling from the command line."""

    @pytest.fixture
    def note(self, tmp_path):
        shutil.copytree(VAULT_DIR, tmp_path / "vault")
        return tmp_path / "vault" / "notes" / "Note.md"

    def test_vault_theme(self, note, capsys):
        ret = main([str(note)])
        assert ret == 0
        html = note.with_suffix(".html").read_text(encoding="utf-8")
        assert "--line-width:42rem;" in html

    def test_no_vault(self, note, capsys):
        ret = main([str(note), "--no-vault"])
        assert ret == 0
        html = note.with_suffix(".html").read_text(encoding="utf-8")
        assert "--line-width" not in html

    def test_broken_vault_reports_error(self, note, capsys):
        (note.parents[1] / ".obsidian" / "appearance.json").write_text("{", encoding="utf-8")
        ret = main([str(note)])
        assert ret == 1
        assert "Error:" in capsys.readouterr().err

    def test_unsupported_construct(self, tmp_path, capsys):
        md_file = tmp_path / "refs.md"
        md_file.write_text("[a][b]\n\n[b]: https://example.com\n", encoding="utf-8")
        ret = main([str(md_file)])
        assert ret == 1
        assert "Unsupported construct" in capsys.readouterr().err
