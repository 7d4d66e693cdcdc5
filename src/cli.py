"""Command-line interface for classifying documents and exporting metadata.

Subcommands:
    extract   Recognise one image or PDF and print its metadata record.
    classify  Classify an already-recognised UTF-8 text file.
    batch     Analyse every document in a folder into one CSV table.
"""

import argparse
import csv
import sys
import time
from collections import Counter
from pathlib import Path

from src.extraction.metadata import DOCUMENT_TYPE_FIELD
from src.output.exporters import export, format_value
from src.pipeline import DocumentAnalysis, DocumentAnalyzer
from src.utils.config import load_config
from src.utils.exceptions import AcquisitionError
from src.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_DOCUMENT_SUFFIXES = frozenset({".png", ".jpg", ".jpeg", ".tif", ".tiff", ".pdf"})
_META_COLUMNS = (
    "filename",
    "status",
    "page_count",
    "processing_time_s",
    "document_type",
    "confidence",
    "error",
)


def _find_documents(input_dir: Path) -> list[Path]:
    """List image and PDF files directly inside ``input_dir``, sorted by name."""
    return sorted(
        path
        for path in input_dir.iterdir()
        if path.is_file() and path.suffix.lower() in _DOCUMENT_SUFFIXES
    )


def _print_progress(value: int) -> None:
    print(f"\rRecognising text... {value:3d}%", end="", file=sys.stderr, flush=True)
    if value >= 100:
        print(file=sys.stderr)


def _analysis_row(analysis: DocumentAnalysis) -> dict[str, object]:
    """Flatten an analysis into one batch row; field values are stringified."""
    classification = analysis.classification
    row: dict[str, object] = {
        "filename": analysis.source_file,
        "status": "success",
        "page_count": analysis.page_count,
        "document_type": classification.document_type.value,
        "confidence": classification.confidence,
        "error": None,
    }
    row.update(
        (name, format_value(value))
        for name, value in analysis.metadata.items()
        if name != DOCUMENT_TYPE_FIELD
    )
    return row


def _failure_row(file_path: Path, exc: AcquisitionError) -> dict[str, object]:
    return {"filename": file_path.name, "status": "failed", "error": exc.message}


def process_folder(
    input_dir: Path,
    output_csv: Path,
    verbose: bool = False,
) -> dict[str, object]:
    """Analyse every document in a folder and write one CSV row per file.

    A file whose text cannot be acquired becomes a failed row; the
    remaining files are still processed.

    Args:
        input_dir: Directory containing image and PDF files.
        output_csv: Destination of the batch CSV.
        verbose: Print one line per file while processing.

    Returns:
        Counts of total, successful and failed files, plus the number
        of successful files per document type under ``by_type``.
    """
    documents = _find_documents(input_dir)
    if not documents:
        logger.warning("No documents found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0, "by_type": {}}

    analyzer = DocumentAnalyzer(load_config())
    logger.info("Analysing %d document(s) from %s", len(documents), input_dir)

    rows: list[dict[str, object]] = []
    by_type: Counter[str] = Counter()
    for position, file_path in enumerate(documents, 1):
        if verbose:
            print(f"Processing [{position}/{len(documents)}]: {file_path.name}")

        started = time.perf_counter()
        try:
            analysis = analyzer.analyze(file_path, file_path.name)
        except AcquisitionError as exc:
            logger.error("Skipping %s: %s", file_path.name, exc)
            rows.append(_failure_row(file_path, exc))
            continue

        row = _analysis_row(analysis)
        row["processing_time_s"] = round(time.perf_counter() - started, 2)
        rows.append(row)
        by_type[analysis.classification.document_type.value] += 1

    _write_csv(rows, output_csv)
    successful = sum(by_type.values())
    summary: dict[str, object] = {
        "total": len(documents),
        "successful": successful,
        "failed": len(documents) - successful,
        "by_type": dict(by_type),
    }
    _print_summary(summary, output_csv)
    return summary


def _write_csv(rows: list[dict[str, object]], output_path: Path) -> None:
    """Write batch rows with the meta columns first.

    Field columns follow in the order they were first extracted, so an
    invoice's columns read VendorName, InvoiceNumber, ... as in its record.
    Nothing is written for an empty batch.
    """
    if not rows:
        return

    field_columns: dict[str, None] = {}
    for row in rows:
        field_columns.update((key, None) for key in row if key not in _META_COLUMNS)
    present = {key for row in rows for key in row}
    columns = [c for c in _META_COLUMNS if c in present] + list(field_columns)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=columns, restval="")
        writer.writeheader()
        writer.writerows(rows)
    logger.info("Wrote %d row(s) to %s", len(rows), output_path)


def _print_summary(summary: dict[str, object], output_csv: Path) -> None:
    rule = "-" * 40
    print(f"\n{rule}\nBatch summary\n{rule}")
    print(f"Documents:  {summary['total']}")
    print(f"Succeeded:  {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    for doc_type, count in sorted(summary.get("by_type", {}).items()):
        print(f"  {doc_type:<12} {count}")
    print(f"CSV:        {output_csv}")


def extract_single(
    file_path: Path,
    fmt: str = "json",
    show_progress: bool = False,
) -> str:
    """Analyse one document and export its metadata record.

    Raises:
        AcquisitionError: If the document's text cannot be acquired.
    """
    analyzer = DocumentAnalyzer(load_config())
    analysis = analyzer.analyze(
        file_path,
        file_path.name,
        on_progress=_print_progress if show_progress else None,
    )
    logger.info(
        "Detected %s (%d%% confidence)",
        analysis.classification.label,
        analysis.classification.confidence,
    )
    return export(analysis.metadata, fmt)


def classify_text_file(file_path: Path, fmt: str = "json") -> str:
    """Classify and extract from an already-recognised text file."""
    analyzer = DocumentAnalyzer(load_config())
    analysis = analyzer.analyze_text(
        file_path.read_text(encoding="utf-8"), source_file=file_path.name
    )
    return export(analysis.metadata, fmt)


def _emit(output: str, destination: Path | None) -> None:
    if destination:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(output, encoding="utf-8")
        print(f"Output written to {destination}")
    else:
        print(output)


def _add_format_options(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "-f",
        "--format",
        choices=["json", "csv"],
        default=None,
        dest="fmt",
        help="Export format (default: export.default_format from config)",
    )
    subparser.add_argument("-o", "--output", type=Path, help="Write to this file")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="document-classifier",
        description="Classify scanned documents and extract their metadata",
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    extract = commands.add_parser("extract", help="Analyse one image or PDF")
    extract.add_argument("file", type=Path, help="Image or PDF document")
    _add_format_options(extract)
    extract.add_argument(
        "--progress", action="store_true", help="Show OCR progress on stderr"
    )

    classify = commands.add_parser(
        "classify", help="Classify an already-recognised text file"
    )
    classify.add_argument("file", type=Path, help="UTF-8 text file")
    _add_format_options(classify)

    batch = commands.add_parser("batch", help="Analyse a folder into one CSV")
    batch.add_argument("input_dir", type=Path, help="Folder of images and PDFs")
    batch.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Batch CSV path (default: results.csv)",
    )
    batch.add_argument("-v", "--verbose", action="store_true", help="Per-file output")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    config = load_config()
    setup_logging(config.log_level)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(args.input_dir, args.output, args.verbose)
        return

    if not args.file.exists():
        print(f"Error: {args.file} does not exist", file=sys.stderr)
        sys.exit(1)

    fmt = args.fmt or config.export.default_format
    if args.command == "classify":
        output = classify_text_file(args.file, fmt)
    else:
        try:
            output = extract_single(args.file, fmt, args.progress)
        except AcquisitionError as exc:
            logger.error("Failed to process %s: %s", args.file.name, exc)
            print("Error: OCR or PDF processing failed", file=sys.stderr)
            sys.exit(1)
    _emit(output, args.output)


if __name__ == "__main__":
    main()
