"""Command-line interface for extracting bill amounts from image files.

Provides subcommands for processing a single bill and for processing a
folder of bills into a CSV summary. Both share the service's result cache.
"""

import argparse
import csv
import sys
from pathlib import Path

from dotenv import load_dotenv

from bill_extract.extraction.errors import ExtractionError
from bill_extract.extraction.models import AmountKind, StructuredResult
from bill_extract.extraction.orchestrator import (
    ExtractionOrchestrator,
    build_orchestrator,
)
from bill_extract.utils.config import load_config
from bill_extract.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS = (
    "*.png",
    "*.jpg",
    "*.jpeg",
    "*.tiff",
    "*.tif",
    "*.webp",
    "*.bmp",
)
_CSV_COLUMNS = [
    "filename",
    "status",
    "currency",
    *(kind.value for kind in AmountKind),
    "error",
]


def _find_images(input_dir: Path) -> list[Path]:
    """Find all supported image files in a directory.

    Args:
        input_dir: Directory to scan for bill images.

    Returns:
        Sorted list of image file paths.
    """
    files: list[Path] = []
    for ext in _SUPPORTED_EXTENSIONS:
        files.extend(input_dir.glob(ext))
        files.extend(input_dir.glob(ext.upper()))
    return sorted(set(files))


def _result_row(filename: str, result: StructuredResult) -> dict[str, object]:
    row: dict[str, object] = {
        "filename": filename,
        "status": "success",
        "currency": result.currency,
        "error": None,
    }
    for kind in AmountKind:
        row[kind.value] = result.amount(kind)
    return row


def process_folder(
    input_dir: Path,
    output_csv: Path,
    orchestrator: ExtractionOrchestrator,
    verbose: bool = False,
) -> dict[str, int]:
    """Process all bill images in a folder and export amounts to CSV.

    A failure on one file is recorded in its row and does not stop the batch.

    Args:
        input_dir: Directory containing bill images.
        output_csv: Path for the output CSV file.
        orchestrator: Extraction orchestrator to run each file through.
        verbose: Whether to print per-file progress.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    files = _find_images(input_dir)
    if not files:
        logger.warning("No images found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    logger.info("Found %d images to process", len(files))

    rows: list[dict[str, object]] = []
    successful = 0
    failed = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Processing [{i}/{len(files)}]: {file_path.name}")

        try:
            result = orchestrator.process(file_path.read_bytes())
            rows.append(_result_row(file_path.name, result))
            successful += 1
        except (ExtractionError, OSError) as exc:
            logger.error("Failed to process %s: %s", file_path.name, exc)
            rows.append(
                {"filename": file_path.name, "status": "failed", "error": str(exc)}
            )
            failed += 1

    _write_csv(rows, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {"total": len(files), "successful": successful, "failed": failed}
    _print_summary(summary, output_csv)
    return summary


def _write_csv(rows: list[dict[str, object]], output_path: Path) -> None:
    """Write extraction rows to a CSV file.

    Args:
        rows: One dictionary per processed file.
        output_path: Path for the output CSV file.
    """
    if not rows:
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=_CSV_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    print(f"\n{'=' * 50}")
    print("Batch Processing Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def extract_single(file_path: Path, orchestrator: ExtractionOrchestrator) -> str:
    """Process a single bill image.

    Args:
        file_path: Path to the image file.
        orchestrator: Extraction orchestrator to run the file through.

    Returns:
        The structured result as JSON text.
    """
    return orchestrator.process(file_path.read_bytes()).to_json()


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Bill Amount Extractor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None, help="YAML configuration file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    batch_parser = subparsers.add_parser("batch", help="Process a folder of bills")
    batch_parser.add_argument(
        "input_dir", type=Path, help="Input directory with images"
    )
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    single_parser = subparsers.add_parser("extract", help="Process a single bill")
    single_parser.add_argument("file", type=Path, help="Image file to process")
    single_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    load_dotenv()
    config = load_config(args.config)
    setup_logging(config.log_level)

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(
            args.input_dir, args.output, build_orchestrator(config), args.verbose
        )
    elif args.command == "extract":
        if not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        try:
            output_str = extract_single(args.file, build_orchestrator(config))
        except ExtractionError as exc:
            hint = getattr(exc, "hint", None)
            print(f"Error: {exc.message}", file=sys.stderr)
            if hint:
                print(f"Hint: {hint}", file=sys.stderr)
            sys.exit(1)
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(output_str)
            print(f"Output written to {args.output}")
        else:
            print(output_str)


if __name__ == "__main__":
    main()
