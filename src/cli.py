"""Command-line interface for analyzing pitch decks outside the API.

Provides subcommands for analyzing a single PDF, batch-analyzing a folder
into a CSV summary, issuing development tokens, and creating tables.
"""

import argparse
import csv
import json
import sys
import time
from pathlib import Path
from typing import Any

from src.api.security import create_access_token
from src.db.base import build_engine, init_db
from src.extraction.analyzer import StructuredAnalyzer
from src.extraction.normalizer import normalize
from src.extraction.schema import AnalysisPayload
from src.ocr.text_extractor import ExtractionStrategy, TextExtractor
from src.pipeline.errors import PipelineError
from src.utils.config import load_config
from src.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS = ("*.pdf",)
_META_COLUMNS = [
    "filename",
    "status",
    "processing_time_s",
    "company_name",
    "industry",
    "confidence",
    "error",
]


def _find_documents(input_dir: Path) -> list[Path]:
    """Find all PDF files in a directory.

    Args:
        input_dir: Directory to scan for decks.

    Returns:
        Sorted list of PDF paths.
    """
    files: list[Path] = []
    for ext in _SUPPORTED_EXTENSIONS:
        files.extend(input_dir.glob(ext))
        files.extend(input_dir.glob(ext.upper()))
    return sorted(set(files))


def analyze_file(
    file_path: Path,
    extractor: TextExtractor,
    analyzer: StructuredAnalyzer,
    strategy: ExtractionStrategy = ExtractionStrategy.LOCAL,
) -> AnalysisPayload:
    """Extract, analyze, and normalize one PDF on disk.

    Args:
        file_path: Path to the PDF.
        extractor: Text extractor.
        analyzer: Structured analyzer.
        strategy: Text-extraction strategy.

    Returns:
        Normalized analysis payload.
    """
    text = extractor.extract(file_path.read_bytes(), strategy)
    return normalize(analyzer.analyze(text))


def _summary_row(filename: str, payload: AnalysisPayload) -> dict[str, object]:
    """Flatten the headline fields of a payload into one CSV row."""
    row: dict[str, object] = {
        "filename": filename,
        "status": "success",
        "company_name": payload.profile.company_name,
        "industry": payload.profile.industry,
        "confidence": payload.confidence,
        "error": None,
    }
    row.update(payload.expert_conclusion.model_dump())
    row["exit_likelihood"] = payload.exit_potential.likelihood
    return row


def process_folder(
    input_dir: Path,
    output_csv: Path,
    use_remote_ocr: bool | None = None,
    verbose: bool = False,
) -> dict[str, int]:
    """Analyze every PDF in a folder and export a CSV summary.

    Args:
        input_dir: Directory containing pitch decks.
        output_csv: Path for the output CSV file.
        use_remote_ocr: Use remote OCR instead of the local text layer.
            ``None`` uses the configured default strategy.
        verbose: Whether to print per-file progress.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    config = load_config()
    extractor = TextExtractor(config.extraction)
    analyzer = StructuredAnalyzer(config.analyzer)
    strategy = ExtractionStrategy.resolve(
        use_remote_ocr, config.extraction.default_strategy
    )

    files = _find_documents(input_dir)
    if not files:
        logger.warning("No pitch decks found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    logger.info("Found %d pitch decks to analyze", len(files))

    results: list[dict[str, object]] = []
    successful = 0
    failed = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Analyzing [{i}/{len(files)}]: {file_path.name}")

        start_time = time.time()
        try:
            payload = analyze_file(file_path, extractor, analyzer, strategy)
            row = _summary_row(file_path.name, payload)
            row["processing_time_s"] = round(time.time() - start_time, 2)
            results.append(row)
            successful += 1
        except Exception as exc:
            logger.error("Failed to analyze %s: %s", file_path.name, exc)
            results.append(
                {
                    "filename": file_path.name,
                    "status": "failed",
                    "error": str(exc),
                }
            )
            failed += 1

    _write_csv(results, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {"total": len(files), "successful": successful, "failed": failed}
    _print_summary(summary, output_csv)
    return summary


def _write_csv(results: list[dict[str, object]], output_path: Path) -> None:
    """Write analysis summaries to a CSV file.

    Args:
        results: List of result dictionaries.
        output_path: Path for the output CSV file.
    """
    if not results:
        return

    all_keys: set[str] = set()
    for r in results:
        all_keys.update(r.keys())

    rating_columns = sorted(all_keys - set(_META_COLUMNS))
    columns = [c for c in _META_COLUMNS if c in all_keys] + rating_columns

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=columns, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(results)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    print(f"\n{'=' * 50}")
    print("Batch Analysis Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def analyze_single(
    file_path: Path, use_remote_ocr: bool | None = None
) -> dict[str, Any]:
    """Analyze one PDF and return the camelCase report content.

    Args:
        file_path: Path to the PDF.
        use_remote_ocr: Use remote OCR instead of the local text layer.
            ``None`` uses the configured default strategy.

    Returns:
        Dictionary with filename and the analysis content.
    """
    config = load_config()
    payload = analyze_file(
        file_path,
        TextExtractor(config.extraction),
        StructuredAnalyzer(config.analyzer),
        ExtractionStrategy.resolve(use_remote_ocr, config.extraction.default_strategy),
    )
    return {"filename": file_path.name, "analysis": payload.to_content()}


def _add_strategy_flags(parser: argparse.ArgumentParser) -> None:
    """Add --remote/--local; with neither, the configured default applies."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--remote",
        dest="remote",
        action="store_const",
        const=True,
        help="Use remote OCR (AWS Textract)",
    )
    group.add_argument(
        "--local",
        dest="remote",
        action="store_const",
        const=False,
        help="Use the PDF text layer",
    )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="DeckInsight pitch-deck analyzer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    single_parser = subparsers.add_parser("analyze", help="Analyze a single PDF")
    single_parser.add_argument("file", type=Path, help="Pitch deck PDF")
    _add_strategy_flags(single_parser)
    single_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    batch_parser = subparsers.add_parser("batch", help="Analyze a folder of PDFs")
    batch_parser.add_argument("input_dir", type=Path, help="Input directory")
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    _add_strategy_flags(batch_parser)
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    token_parser = subparsers.add_parser("token", help="Issue a bearer token")
    token_parser.add_argument("user_id", help="User id to issue the token for")

    subparsers.add_parser("init-db", help="Create database tables")

    args = parser.parse_args(argv)

    config = load_config()
    setup_logging(config.log_level)

    if args.command == "analyze":
        if not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        try:
            result = analyze_single(args.file, args.remote)
        except PipelineError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            sys.exit(1)
        output_str = json.dumps(result, indent=2)
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(output_str)
            print(f"Output written to {args.output}")
        else:
            print(output_str)
    elif args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(args.input_dir, args.output, args.remote, args.verbose)
    elif args.command == "token":
        print(
            create_access_token(
                args.user_id, config.auth.secret, config.auth.token_ttl_seconds
            )
        )
    elif args.command == "init-db":
        init_db(build_engine(config.database))
        print(f"Database ready at {config.database.url}")
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
