"""
Tests for the command-line interface.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from syllabus_calendar.cli import app
from syllabus_calendar.extraction.validator import ResponseValidator
from syllabus_calendar.utils.errors import InvalidFormat, MisconfiguredCredential

runner = CliRunner()


@pytest.fixture
def pdf_file(tmp_path, syllabus_pdf):
    path = tmp_path / "syllabus.pdf"
    path.write_bytes(syllabus_pdf)
    return path


@pytest.fixture
def pipeline(model_reply):
    mock_pipeline = MagicMock()
    mock_pipeline.process_file = AsyncMock(return_value=ResponseValidator().validate(model_reply))
    with patch("syllabus_calendar.cli.setup_logging"), patch(
        "syllabus_calendar.cli.create_syllabus_pipeline", return_value=mock_pipeline
    ):
        yield mock_pipeline


class TestExtractCommand:

    def test_missing_file(self, pipeline, tmp_path):
        result = runner.invoke(app, ["extract", str(tmp_path / "nope.pdf")])

        assert result.exit_code == 1
        assert "File not found" in result.stdout
        pipeline.process_file.assert_not_called()

    def test_json_output(self, pipeline, pdf_file):
        result = runner.invoke(app, ["extract", str(pdf_file), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["courseName"] == "CS 101: Introduction to Computer Science"
        assert len(data["events"]) == 3
        pipeline.process_file.assert_awaited_once_with(pdf_file)

    def test_output_file(self, pipeline, pdf_file, tmp_path):
        out = tmp_path / "events.json"

        result = runner.invoke(app, ["extract", str(pdf_file), "-o", str(out)])

        assert result.exit_code == 0
        assert json.loads(out.read_text(encoding="utf-8"))["year"] == 2024
        assert "Wrote 3 events" in result.stdout

    def test_table_output(self, pipeline, pdf_file):
        result = runner.invoke(app, ["extract", str(pdf_file)])

        assert result.exit_code == 0
        assert "Successfully extracted 3 events" in result.stdout
        assert "Instructor: Dr. Ada Lovelace" in result.stdout

    @pytest.mark.parametrize(
        "error, message",
        [
            (InvalidFormat("Invalid file format. Please upload a PDF file."), "Invalid file format"),
            (MisconfiguredCredential("OPENAI_API_KEY"), "OPENAI_API_KEY not configured"),
        ],
    )
    def test_pipeline_errors(self, pipeline, pdf_file, error, message):
        pipeline.process_file.side_effect = error

        result = runner.invoke(app, ["extract", str(pdf_file)])

        assert result.exit_code == 1
        assert message in result.stdout


class TestPromptCommand:

    def test_prints_prompt(self, pipeline, pdf_file):
        pipeline.read_pdf.return_value = b"%PDF-1.7"
        pipeline.build_prompt = AsyncMock(return_value="Syllabus text:\n[brackets] stay literal")

        result = runner.invoke(app, ["prompt", str(pdf_file)])

        assert result.exit_code == 0
        assert "[brackets] stay literal" in result.stdout
        pipeline.build_prompt.assert_awaited_once_with(b"%PDF-1.7")


class TestUsageErrors:

    def test_bad_environment_reported(self, monkeypatch, pdf_file):
        monkeypatch.setenv("SYLLABUS_REQUEST_TIMEOUT", "soon")

        with patch("syllabus_calendar.cli.setup_logging"):
            result = runner.invoke(app, ["extract", str(pdf_file)])

        assert result.exit_code == 1
        assert "Invalid configuration: SYLLABUS_REQUEST_TIMEOUT" in result.stdout
        assert isinstance(result.exception, SystemExit)

    def test_directory_path_reported(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        with patch("syllabus_calendar.cli.setup_logging"):
            result = runner.invoke(app, ["prompt", str(tmp_path)])

        assert result.exit_code == 1
        assert "Not a file" in result.stdout
        assert isinstance(result.exception, SystemExit)
