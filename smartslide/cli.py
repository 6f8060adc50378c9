"""
Command-line interface for SmartSlide.

Converts PPTX decks to the extracted-text PDF, shows what text would be
extracted from each slide, and runs the LLM review on a PDF or PPTX file.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from rich.table import Table

from smartslide.configs.config import config
from smartslide.configs.logging_config import setup_logging
from smartslide.console import get_console, print_status
from smartslide.document.composer import MalformedSlidePolicy
from smartslide.document.container import ContainerExtractor
from smartslide.document.converter import (
    PDF_MIME_TYPE,
    build_composer,
    convert_presentation_detailed,
    encode_document,
    read_presentation,
)
from smartslide.document.errors import ConversionError
from smartslide.document.markup import MarkupParseError, extract_paragraphs
from smartslide.review.analyzer import AnalysisError, PresentationAnalyzer
from smartslide.schemas.analysis import AnalysisResult
from smartslide.schemas.upload import normalize_subject, source_type_for

console = get_console()


def _fail(message: str) -> NoReturn:
    print_status("ERROR", "bold red", message, err=True)
    sys.exit(1)


def _read_input(path: str) -> bytes:
    try:
        return read_presentation(Path(path))
    except OSError as exc:
        _fail(f"Cannot read {path}: {exc.strerror or exc}")


def cmd_convert(args: argparse.Namespace) -> None:
    data = _read_input(args.input)
    try:
        result = convert_presentation_detailed(
            data, composer=build_composer(config, args.policy)
        )
    except ConversionError as exc:
        _fail(exc.message)

    if args.base64 and not args.output:
        sys.stdout.write(result.base64 + "\n")
        return

    output = Path(args.output) if args.output else Path(args.input).with_suffix(".pdf")
    if args.base64:
        output.write_text(result.base64 + "\n", encoding="ascii")
    else:
        output.write_bytes(result.content)
    print_status(
        "OK",
        "bold green",
        f"{result.slide_count} slide(s) -> {result.page_count} page(s): {output}",
    )


def cmd_inspect(args: argparse.Namespace) -> None:
    data = _read_input(args.input)
    try:
        slides = ContainerExtractor().extract(data)
    except ConversionError as exc:
        _fail(exc.message)

    table = Table(title=f"Slides in {Path(args.input).name}")
    table.add_column("#", justify="right")
    table.add_column("Index", justify="right")
    table.add_column("Entry")
    table.add_column("Text")
    for number, slide in enumerate(slides, 1):
        try:
            paragraphs = extract_paragraphs(slide.raw_xml)
            text = "\n".join(paragraphs) if paragraphs else "[dim](no text)[/]"
        except MarkupParseError as exc:
            text = f"[red]unreadable markup: {exc}[/]"
        table.add_row(str(number), str(slide.index), slide.entry_name, text)
    console.print(table)


def _print_analysis(result: AnalysisResult, subject: str) -> None:
    console.print(f"[bold cyan]Review for:[/] {subject}")

    console.print("\n[bold red]Technical correctness[/]")
    if not result.technical_correctness:
        console.print("  [dim]No issues reported.[/]")
    for item in result.technical_correctness:
        where = f" ({item.slide_number})" if item.slide_number else ""
        console.print(f"  - [bold]{item.issue}[/]{where}: {item.explanation}")

    console.print("\n[bold yellow]Areas for improvement[/]")
    for suggestion in result.areas_for_improvement:
        console.print(f"  - [bold]{suggestion.suggestion}[/]: {suggestion.details}")

    console.print("\n[bold green]Strengths[/]")
    for strength in result.strengths:
        console.print(f"  - [bold]{strength.point}[/]: {strength.details}")


def cmd_analyze(args: argparse.Namespace) -> None:
    if not config.google_gemini_api_key:
        _fail("GOOGLE_GEMINI_API_KEY is not configured.")
    try:
        source_type = source_type_for(args.input)
    except ValueError as exc:
        _fail(str(exc))

    data = _read_input(args.input)
    try:
        if source_type == "slides":
            document_base64 = convert_presentation_detailed(
                data, composer=build_composer(config)
            ).base64
        else:
            document_base64 = encode_document(data)
        result = PresentationAnalyzer().analyze(
            document_base64, PDF_MIME_TYPE, args.course
        )
    except ConversionError as exc:
        _fail(exc.message)
    except AnalysisError as exc:
        _fail(str(exc))

    if args.json:
        console.print_json(data=result.model_dump(by_alias=True))
    else:
        _print_analysis(result, normalize_subject(args.course))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smartslide",
        description="SmartSlide Reviewer CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  smartslide convert deck.pptx                  # Writes deck.pdf
  smartslide convert deck.pptx --base64         # Prints the PDF as Base64
  smartslide inspect deck.pptx                  # Shows extracted slide text
  smartslide analyze deck.pdf --course "Operating Systems"
        """,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL for this run",
    )
    sub = parser.add_subparsers(dest="command")

    convert_parser = sub.add_parser(
        "convert", help="Convert a PPTX deck to an extracted-text PDF"
    )
    convert_parser.add_argument("input", help="Path to the .pptx file")
    convert_parser.add_argument(
        "-o", "--output", help="Output path (default: input name with .pdf)"
    )
    convert_parser.add_argument(
        "--base64",
        action="store_true",
        help="Emit the PDF as Base64 text instead of binary",
    )
    convert_parser.add_argument(
        "--policy",
        choices=[policy.value for policy in MalformedSlidePolicy],
        default=None,
        help="What to do with unreadable slides (default: MALFORMED_SLIDE_POLICY)",
    )
    convert_parser.set_defaults(func=cmd_convert)

    inspect_parser = sub.add_parser(
        "inspect", help="List slide parts and the text extracted from each"
    )
    inspect_parser.add_argument("input", help="Path to the .pptx file")
    inspect_parser.set_defaults(func=cmd_inspect)

    analyze_parser = sub.add_parser(
        "analyze", help="Review a PDF or PPTX deck with the configured LLM"
    )
    analyze_parser.add_argument("input", help="Path to the .pdf or .pptx file")
    analyze_parser.add_argument("--course", help="Course or subject of the deck")
    analyze_parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of human-readable text",
    )
    analyze_parser.set_defaults(func=cmd_analyze)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "command", None):
        parser.print_help()
        return
    setup_logging(args.log_level or "WARNING", component="cli")
    args.func(args)


if __name__ == "__main__":
    main()
