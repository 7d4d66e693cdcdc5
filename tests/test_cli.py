"""Tests for the command-line interface and batch CSV export."""

import csv
import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from src.classification.classifier import classify
from src.cli import (
    _analysis_row,
    _find_documents,
    _print_summary,
    _write_csv,
    classify_text_file,
    extract_single,
    main,
    process_folder,
)
from src.extraction.dispatcher import extract_metadata
from src.pipeline import DocumentAnalysis
from src.utils.config import AppConfig
from src.utils.exceptions import AcquisitionError


def _make_analysis(text: str, filename: str = "test.png", pages: int = 1) -> DocumentAnalysis:
    """Build a real analysis for already-recognised text."""
    classification = classify(text)
    return DocumentAnalysis(
        source_file=filename,
        page_count=pages,
        text=text,
        classification=classification,
        metadata=extract_metadata(classification.document_type, text),
    )


class TestFindDocuments:
    """Tests for document discovery."""

    def test_find_png_files(self, tmp_path: Path) -> None:
        (tmp_path / "doc1.png").touch()
        (tmp_path / "doc2.png").touch()
        (tmp_path / "readme.txt").touch()
        files = _find_documents(tmp_path)
        assert len(files) == 2
        assert all(f.suffix == ".png" for f in files)

    def test_find_mixed_extensions(self, tmp_path: Path) -> None:
        (tmp_path / "doc.png").touch()
        (tmp_path / "doc.jpg").touch()
        (tmp_path / "doc.pdf").touch()
        (tmp_path / "doc.tiff").touch()
        assert len(_find_documents(tmp_path)) == 4

    def test_find_no_documents(self, tmp_path: Path) -> None:
        (tmp_path / "readme.txt").touch()
        assert _find_documents(tmp_path) == []

    def test_find_uppercase_extensions(self, tmp_path: Path) -> None:
        (tmp_path / "DOC.PDF").touch()
        assert len(_find_documents(tmp_path)) == 1


class TestAnalysisRow:
    """Tests for turning an analysis into a batch CSV row."""

    def test_invoice_row(self, invoice_text: str) -> None:
        row = _analysis_row(_make_analysis(invoice_text, "inv.pdf", pages=2))
        assert row["filename"] == "inv.pdf"
        assert row["status"] == "success"
        assert row["page_count"] == 2
        assert row["document_type"] == "invoice"
        assert row["confidence"] == 95
        assert row["TotalAmount"] == "100"
        assert "DocumentType" not in row

    def test_unknown_row_has_no_fields(self, prose_text: str) -> None:
        row = _analysis_row(_make_analysis(prose_text))
        assert row["document_type"] == "unknown"
        assert row["confidence"] == 0
        assert row["error"] is None


class TestWriteCsv:
    """Tests for CSV writing."""

    def test_write_csv_content(self, tmp_path: Path) -> None:
        results = [
            {
                "filename": "test.png",
                "status": "success",
                "error": None,
                "InvoiceDate": "2024-01-10",
                "TotalAmount": "100",
            }
        ]
        output = tmp_path / "results.csv"
        _write_csv(results, output)

        with open(output) as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 1
        assert rows[0]["filename"] == "test.png"
        assert rows[0]["InvoiceDate"] == "2024-01-10"

    def test_write_csv_empty_results(self, tmp_path: Path) -> None:
        output = tmp_path / "results.csv"
        _write_csv([], output)
        assert not output.exists()

    def test_write_csv_creates_parent_dirs(self, tmp_path: Path) -> None:
        output = tmp_path / "subdir" / "results.csv"
        _write_csv([{"filename": "test.png", "status": "success"}], output)
        assert output.exists()

    def test_csv_meta_columns_first(self, tmp_path: Path) -> None:
        results = [
            {
                "filename": "a.png",
                "status": "success",
                "document_type": "form",
                "Email": "a@example.com",
            },
            {"filename": "b.png", "status": "failed", "error": "OCR failed"},
        ]
        output = tmp_path / "results.csv"
        _write_csv(results, output)

        with open(output) as f:
            headers = next(csv.reader(f))
        assert headers == ["filename", "status", "document_type", "error", "Email"]


class TestPrintSummary:
    """Tests for summary printing."""

    def test_print_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
        summary = {
            "total": 5,
            "successful": 4,
            "failed": 1,
            "by_type": {"invoice": 3, "form": 1},
        }
        _print_summary(summary, Path("results.csv"))
        out = capsys.readouterr().out
        assert "Documents:  5" in out
        assert "Succeeded:  4" in out
        assert "Failed:     1" in out
        assert "  invoice      3" in out
        assert out.index("form") < out.index("invoice")
        assert "results.csv" in out


class TestProcessFolder:
    """Tests for batch folder processing."""

    @patch("src.cli.DocumentAnalyzer")
    @patch("src.cli.load_config")
    def test_process_folder_success(
        self,
        mock_config: MagicMock,
        mock_analyzer_cls: MagicMock,
        tmp_path: Path,
        invoice_text: str,
    ) -> None:
        mock_config.return_value = AppConfig()
        mock_analyzer_cls.return_value.analyze.return_value = _make_analysis(invoice_text)

        (tmp_path / "doc1.png").touch()
        (tmp_path / "doc2.png").touch()
        output_csv = tmp_path / "output.csv"

        summary = process_folder(tmp_path, output_csv)
        assert summary == {
            "total": 2,
            "successful": 2,
            "failed": 0,
            "by_type": {"invoice": 2},
        }
        with open(output_csv) as f:
            rows = list(csv.DictReader(f))
        assert [r["document_type"] for r in rows] == ["invoice", "invoice"]
        assert rows[0]["InvoiceNumber"] == "INV-001"

    @patch("src.cli.DocumentAnalyzer")
    @patch("src.cli.load_config")
    def test_process_folder_with_failure(
        self,
        mock_config: MagicMock,
        mock_analyzer_cls: MagicMock,
        tmp_path: Path,
        certificate_text: str,
    ) -> None:
        mock_config.return_value = AppConfig()
        mock_analyzer_cls.return_value.analyze.side_effect = [
            _make_analysis(certificate_text, "doc1.png"),
            AcquisitionError("OCR failed"),
        ]

        (tmp_path / "doc1.png").touch()
        (tmp_path / "doc2.png").touch()
        output_csv = tmp_path / "output.csv"

        summary = process_folder(tmp_path, output_csv)
        assert summary["successful"] == 1
        assert summary["failed"] == 1
        with open(output_csv) as f:
            rows = list(csv.DictReader(f))
        assert rows[1]["status"] == "failed"
        assert rows[1]["error"] == "OCR failed"
        assert summary["by_type"] == {"certificate": 1}

    @patch("src.cli.load_config")
    def test_process_folder_empty(self, mock_config: MagicMock, tmp_path: Path) -> None:
        mock_config.return_value = AppConfig()
        summary = process_folder(tmp_path, tmp_path / "output.csv")
        assert summary["total"] == 0

    @patch("src.cli.DocumentAnalyzer")
    @patch("src.cli.load_config")
    def test_process_folder_verbose(
        self,
        mock_config: MagicMock,
        mock_analyzer_cls: MagicMock,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        prose_text: str,
    ) -> None:
        mock_config.return_value = AppConfig()
        mock_analyzer_cls.return_value.analyze.return_value = _make_analysis(prose_text)

        (tmp_path / "doc1.png").touch()
        process_folder(tmp_path, tmp_path / "output.csv", verbose=True)
        captured = capsys.readouterr()
        assert "Processing [1/1]" in captured.out


class TestExtractSingle:
    """Tests for single file extraction."""

    @patch("src.cli.DocumentAnalyzer")
    @patch("src.cli.load_config")
    def test_extract_single_json(
        self,
        mock_config: MagicMock,
        mock_analyzer_cls: MagicMock,
        tmp_path: Path,
        invoice_text: str,
    ) -> None:
        mock_config.return_value = AppConfig()
        mock_analyzer_cls.return_value.analyze.return_value = _make_analysis(invoice_text)
        doc_path = tmp_path / "test.png"
        doc_path.touch()

        output = extract_single(doc_path)

        parsed = json.loads(output)
        assert parsed["DocumentType"] == "invoice"
        assert parsed["TotalAmount"] == 100.0
        mock_analyzer_cls.return_value.analyze.assert_called_once_with(
            doc_path, "test.png", on_progress=None
        )

    @patch("src.cli.DocumentAnalyzer")
    @patch("src.cli.load_config")
    def test_extract_single_csv(
        self,
        mock_config: MagicMock,
        mock_analyzer_cls: MagicMock,
        tmp_path: Path,
        certificate_text: str,
    ) -> None:
        mock_config.return_value = AppConfig()
        mock_analyzer_cls.return_value.analyze.return_value = _make_analysis(
            certificate_text
        )
        doc_path = tmp_path / "cert.png"
        doc_path.touch()

        output = extract_single(doc_path, fmt="csv")

        assert output.splitlines() == [
            "Field,Value",
            '"DocumentType","certificate"',
            '"RecipientName","Jane Doe"',
        ]

    @patch("src.cli.load_config")
    def test_classify_text_file(
        self, mock_config: MagicMock, tmp_path: Path, invoice_text: str
    ) -> None:
        mock_config.return_value = AppConfig()
        text_path = tmp_path / "invoice.txt"
        text_path.write_text(invoice_text, encoding="utf-8")

        parsed = json.loads(classify_text_file(text_path))

        assert parsed["InvoiceNumber"] == "INV-001"


class TestCLIMain:
    """Tests for the CLI argument parser and main entry point."""

    def test_no_command_shows_help(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0

    def test_batch_nonexistent_directory(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["batch", "/nonexistent/path"])
        assert exc_info.value.code == 1
        assert "not a directory" in capsys.readouterr().err

    def test_extract_nonexistent_file(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["extract", "/nonexistent/file.png"])
        assert exc_info.value.code == 1
        assert "does not exist" in capsys.readouterr().err

    @patch("src.cli.process_folder")
    def test_batch_command(self, mock_pf: MagicMock, tmp_path: Path) -> None:
        mock_pf.return_value = {"total": 1, "successful": 1, "failed": 0}
        output = tmp_path / "out.csv"
        main(["batch", str(tmp_path), "-o", str(output), "-v"])
        mock_pf.assert_called_once_with(tmp_path, output, True)

    @patch("src.cli.extract_single")
    def test_extract_writes_output_file(
        self, mock_extract: MagicMock, tmp_path: Path
    ) -> None:
        mock_extract.return_value = '{\n  "DocumentType": "form"\n}'
        doc_path = tmp_path / "form.png"
        doc_path.touch()
        output = tmp_path / "out" / "form.json"

        main(["extract", str(doc_path), "-f", "json", "-o", str(output)])

        assert output.read_text(encoding="utf-8") == mock_extract.return_value
        mock_extract.assert_called_once_with(doc_path, "json", False)

    @patch("src.cli.extract_single")
    def test_extract_acquisition_failure(
        self,
        mock_extract: MagicMock,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        mock_extract.side_effect = AcquisitionError("PDF rendering failed")
        doc_path = tmp_path / "broken.pdf"
        doc_path.touch()

        with pytest.raises(SystemExit) as exc_info:
            main(["extract", str(doc_path)])
        assert exc_info.value.code == 1
        assert "OCR or PDF processing failed" in capsys.readouterr().err

    def test_classify_prints_csv(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        text_path = tmp_path / "form.txt"
        text_path.write_text("Application Form\nEmail: jane@example.com", encoding="utf-8")

        main(["classify", str(text_path), "--format", "csv"])

        out = capsys.readouterr().out
        assert '"DocumentType","form"' in out
        assert '"Email","jane@example.com"' in out
