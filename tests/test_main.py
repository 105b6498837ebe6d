import sys
import os
import logging

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from links_toggler import main as cli


@pytest.fixture
def vault(tmp_path, monkeypatch):
    monkeypatch.setattr(
        cli, "setup_logging",
        lambda **kwargs: logging.LoggerAdapter(logging.getLogger("links-toggler.tests"), {}),
    )
    monkeypatch.setattr(cli, "install_global_exception_hooks", lambda log: None)

    root = tmp_path / "vault"
    (root / "Folder").mkdir(parents=True)
    (root / "Templates").mkdir()
    (root / "Folder" / "Note.md").write_text("# Note\n", encoding="utf-8")
    (root / "Other.md").write_text("[[Note]]\n", encoding="utf-8")
    (root / "Templates" / "Daily.md").write_text("[[Note]]\n", encoding="utf-8")
    return root


def _args(vault, tmp_path, *rest):
    return ["--vault", str(vault), "--settings", str(tmp_path / "settings.ini"), *rest]


def test_single_file(vault, tmp_path, capsys):
    code = cli.main(_args(vault, tmp_path, "wiki-to-md", "--file", "Other.md", "--style", "relative"))
    assert code == 0
    assert (vault / "Other.md").read_text(encoding="utf-8") == "[Note](Folder/Note.md)\n"
    assert "Converted links in current file" in capsys.readouterr().out


def test_single_file_no_links(vault, tmp_path, capsys):
    code = cli.main(_args(vault, tmp_path, "md-to-wiki", "--file", str(vault / "Other.md")))
    assert code == 0
    assert "No links to convert in current file" in capsys.readouterr().out


def test_single_file_missing(vault, tmp_path, capsys):
    assert cli.main(_args(vault, tmp_path, "wiki-to-md", "--file", "Missing.md")) == 1
    assert "Missing.md" in capsys.readouterr().err


def test_vault_safe_mode_by_default(vault, tmp_path, capsys):
    code = cli.main(_args(vault, tmp_path, "wiki-to-md"))
    assert code == 0
    assert "Safe mode: 2 file(s) would be modified" in capsys.readouterr().out
    assert (vault / "Other.md").read_text(encoding="utf-8") == "[[Note]]\n"


def test_vault_apply_with_ignore(vault, tmp_path, capsys):
    code = cli.main(_args(vault, tmp_path, "wiki-to-md", "--apply", "--ignore", "Templates/"))
    assert code == 0
    assert "Converted links in 1 file(s)" in capsys.readouterr().out
    assert (vault / "Other.md").read_text(encoding="utf-8") == "[Note](/Folder/Note.md)\n"
    assert (vault / "Templates" / "Daily.md").read_text(encoding="utf-8") == "[[Note]]\n"


def test_settings_commands(vault, tmp_path, capsys):
    assert cli.main(_args(vault, tmp_path, "toggle-safe-mode")) == 0
    assert "Safe Mode is now OFF (Writes Enabled)" in capsys.readouterr().out

    assert cli.main(_args(vault, tmp_path, "ignore-folder", "add", "/Templates/")) == 0
    assert "Ignored folders: Templates" in capsys.readouterr().out

    assert cli.main(_args(vault, tmp_path, "show-settings")) == 0
    out = capsys.readouterr().out
    assert "Safe mode: OFF (Writes Enabled)" in out
    assert "Link style: absolute" in out

    assert cli.main(_args(vault, tmp_path, "wiki-to-md")) == 0
    assert "Converted links in 1 file(s)" in capsys.readouterr().out
    assert (vault / "Templates" / "Daily.md").read_text(encoding="utf-8") == "[[Note]]\n"


def test_vault_reports_finished_payload(vault, tmp_path, capsys, monkeypatch):
    convert_corpus = cli.ConversionOrchestrator.convert_corpus

    def convert_and_forget(self, *args, **kwargs):
        result = convert_corpus(self, *args, **kwargs)
        self.last_result = None
        return result

    monkeypatch.setattr(cli.ConversionOrchestrator, "convert_corpus", convert_and_forget)

    code = cli.main(_args(vault, tmp_path, "wiki-to-md"))
    assert code == 0
    assert "Safe mode: 2 file(s) would be modified" in capsys.readouterr().out


def test_vault_write_failure(vault, tmp_path, capsys, monkeypatch):
    write = cli.FsDocumentStore.write

    def failing_write(self, path, text):
        if path.startswith("Templates/"):
            raise cli.DocumentStoreError(path, "read-only")
        write(self, path, text)

    monkeypatch.setattr(cli.FsDocumentStore, "write", failing_write)

    code = cli.main(_args(vault, tmp_path, "wiki-to-md", "--apply"))
    captured = capsys.readouterr()
    assert code == 1
    assert "Converted links in 1 file(s); 1 file(s) could not be updated" in captured.out
    assert "Templates/Daily.md" in captured.err
    assert (vault / "Other.md").read_text(encoding="utf-8") == "[Note](/Folder/Note.md)\n"
