"""Tests for the DocVeil command line interface."""

import json

import pytest
from click.testing import CliRunner

from docveil import __version__
from docveil.cli import main as cli_module
from docveil.cli.main import cli
from docveil.formats.docx import extract_text
from docveil.oracles.registry import OracleRegistry
from tests.utils.docx_helpers import build_docx, paragraph
from tests.utils.pdf_helpers import build_pdf


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def settings_seen(monkeypatch, name_oracle):
    """Serve the fake oracle as the "presidio" provider and record the settings used."""
    seen = []

    def from_settings(cls, settings):
        seen.append(settings)
        registry = cls(default_provider="presidio")
        registry.register_oracle(name_oracle, name="presidio")
        return registry

    monkeypatch.setattr(OracleRegistry, "from_settings", classmethod(from_settings))
    return seen


@pytest.fixture
def docx_file(tmp_path, sample_docx):
    path = tmp_path / "letter.docx"
    path.write_bytes(sample_docx)
    return path


class TestVersion:
    def test_version(self, runner):
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert result.output.strip() == f"DocVeil v{__version__}"

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        commands = ("anonymize-text", "anonymize-docx", "anonymize-file", "chunk", "extract-text")
        for command in commands:
            assert command in result.output


class TestAnonymizeText:
    """Test the anonymize-text command."""

    def test_from_stdin(self, runner, settings_seen):
        result = runner.invoke(cli, ["anonymize-text"], input="Contact John Smith at work.")
        assert result.exit_code == 0
        assert result.output == "Contact [NAME] at work.\n"

    def test_from_file_as_json(self, runner, settings_seen, tmp_path):
        source = tmp_path / "note.txt"
        source.write_text("Mail john@example.com", encoding="utf-8")

        result = runner.invoke(cli, ["anonymize-text", str(source), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["anonymizedText"] == "Mail [EMAIL]"
        assert data["chunksProcessed"] == 1

    def test_progress(self, runner, settings_seen):
        result = runner.invoke(
            cli, ["anonymize-text", "--progress"], input="Contact John Smith at work."
        )
        assert result.exit_code == 0
        assert "[  0%] Starting anonymization..." in result.output
        assert "[100%] Anonymization complete" in result.output

    def test_empty_input(self, runner, settings_seen):
        result = runner.invoke(cli, ["anonymize-text"], input="   ")
        assert result.exit_code == 1
        assert "Text cannot be empty" in result.output

    def test_unconfigured_provider(self, runner, settings_seen):
        result = runner.invoke(
            cli, ["anonymize-text", "--provider", "openai"], input="John Smith"
        )
        assert result.exit_code == 1
        assert 'LLM provider "openai" is not configured' in result.output
        assert "Check your environment variables" in result.output

    def test_anthropic_provider_choice(self, runner, settings_seen, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")
        result = runner.invoke(
            cli, ["anonymize-text", "--provider", "anthropic"], input="John Smith"
        )
        assert result.exit_code == 1
        assert settings_seen[0].anthropic.api_key == "sk-ant-test"
        assert 'LLM provider "anthropic" is not configured' in result.output

    def test_unknown_provider_choice(self, runner, settings_seen):
        result = runner.invoke(cli, ["anonymize-text", "--provider", "gemini"], input="x")
        assert result.exit_code == 2

    def test_config_file(self, runner, settings_seen, tmp_path):
        config_file = tmp_path / "docveil.yaml"
        config_file.write_text("oracles:\n  default_provider: ollama\n  ollama: {}\n")

        result = runner.invoke(
            cli, ["--config", str(config_file), "anonymize-text"], input="John Smith"
        )

        assert result.exit_code == 0
        assert settings_seen[0].default_provider == "ollama"
        assert settings_seen[0].configured_providers() == ["ollama"]


class TestAnonymizeDocx:
    """Test the anonymize-docx command."""

    def test_explicit_output(self, runner, settings_seen, docx_file, tmp_path):
        target = tmp_path / "clean.docx"
        result = runner.invoke(cli, ["anonymize-docx", str(docx_file), "-o", str(target)])

        assert result.exit_code == 0
        assert f"✓ Saved anonymized document to: {target}" in result.output
        assert extract_text(target.read_bytes()) == (
            "Contact [NAME] at work.\nEmail [EMAIL] for details.\n"
        )

    def test_default_output(self, runner, settings_seen, docx_file):
        result = runner.invoke(cli, ["anonymize-docx", str(docx_file), "--parallel"])
        assert result.exit_code == 0
        assert (docx_file.parent / "letter_anonymized.docx").exists()

    def test_invalid_document(self, runner, settings_seen, tmp_path):
        source = tmp_path / "fake.docx"
        source.write_bytes(b"not a zip")
        result = runner.invoke(cli, ["anonymize-docx", str(source)])
        assert result.exit_code == 1
        assert "Not a zip-compatible package" in result.output

    def test_missing_file(self, runner, settings_seen, tmp_path):
        result = runner.invoke(cli, ["anonymize-docx", str(tmp_path / "nope.docx")])
        assert result.exit_code == 2


class TestChunkAndExtract:
    """Test the inspection commands."""

    def test_chunk_text_file(self, runner, tmp_path):
        source = tmp_path / "note.txt"
        source.write_text("One. Two. Three.", encoding="utf-8")

        result = runner.invoke(
            cli, ["--chunk-size", "8", "--chunk-overlap", "0", "chunk", str(source)]
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [c["text"] for c in data["chunks"]] == ["One.", "Two.", "Three."]
        assert data["statistics"]["total_chunks"] == 3

    def test_chunk_docx(self, runner, docx_file):
        result = runner.invoke(cli, ["chunk", str(docx_file)])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["chunks"][0]["text"].startswith("Contact John Smith")

    def test_extract_text(self, runner, tmp_path):
        source = tmp_path / "table.docx"
        source.write_bytes(build_docx(paragraph("First") + paragraph("Second")))

        result = runner.invoke(cli, ["extract-text", str(source)])

        assert result.exit_code == 0
        assert result.output == "First\nSecond\n"

    def test_chunk_pdf(self, runner, tmp_path):
        source = tmp_path / "letter.pdf"
        source.write_bytes(build_pdf("Contact John Smith at work."))

        result = runner.invoke(cli, ["chunk", str(source)])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["chunks"][0]["text"].startswith("Contact John Smith")

    def test_extract_text_pdf(self, runner, tmp_path):
        source = tmp_path / "letter.pdf"
        source.write_bytes(build_pdf("Dear Jane Doe,"))

        result = runner.invoke(cli, ["extract-text", str(source)])

        assert result.exit_code == 0
        assert "Dear Jane Doe," in result.output


class TestMain:
    def test_unexpected_error(self, monkeypatch, capsys):
        def broken():
            raise RuntimeError("boom")

        monkeypatch.setattr(cli_module, "cli", broken)
        assert cli_module.main() == 1
        assert "Error: boom" in capsys.readouterr().err


class TestAnonymizeFile:
    """Test the anonymize-file command."""

    def test_pdf_to_stdout(self, runner, settings_seen, tmp_path):
        source = tmp_path / "letter.pdf"
        source.write_bytes(build_pdf("Contact John Smith at work."))

        result = runner.invoke(cli, ["anonymize-file", str(source)])

        assert result.exit_code == 0
        assert "Contact [NAME] at work." in result.output

    def test_output_file_as_json(self, runner, settings_seen, docx_file, tmp_path):
        target = tmp_path / "letter.json"

        result = runner.invoke(
            cli, ["anonymize-file", str(docx_file), "--json", "--output", str(target)]
        )

        assert result.exit_code == 0
        assert "Saved anonymized text to" in result.output
        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["anonymizedText"].startswith("Contact [NAME] at work.")

    def test_unsupported_type(self, runner, settings_seen, tmp_path):
        source = tmp_path / "sheet.odt"
        source.write_bytes(b"PK")

        result = runner.invoke(cli, ["anonymize-file", str(source)])

        assert result.exit_code == 1
        assert "Unsupported file type: .odt" in result.output
        assert "Use one of: .docx, .pdf, .txt" in result.output
