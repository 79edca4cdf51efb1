# paper_sections/cli.py

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from paper_sections.api.models import LlmRequest
from paper_sections.grobid_client import GrobidClient
from paper_sections.llm import LlmClientError
from paper_sections.parsing.tei_parser import (
    SECTION_NAMES,
    SectionExtractionError,
    extract_sections_from_tei,
)
from paper_sections.parsing.tree import TeiParseError
from paper_sections.processing import ProcessingError, ProcessingService

app = typer.Typer(help="Extract sections from scholarly PDFs via GROBID.")
console = Console()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _print_sections(sections: Dict[str, str], as_json: bool) -> None:
    if as_json:
        console.print_json(json.dumps(sections, ensure_ascii=False))
        return

    if not sections:
        console.print("[yellow]No sections found.[/yellow]")
        return

    # Fixed order so output is stable regardless of extraction order
    for name in SECTION_NAMES:
        if name in sections:
            console.rule(f"[bold cyan]{name}[/bold cyan]")
            console.print(sections[name], markup=False)


def _require_file(path: Path, kind: str) -> None:
    if not path.exists():
        console.print(f"[red]{kind} not found:[/red] {path}")
        raise typer.Exit(code=1)


def _build_service(grobid_url: Optional[str]) -> ProcessingService:
    return ProcessingService(grobid_client=GrobidClient(base_url=grobid_url))


def _process(service: ProcessingService, pdf_file: Path) -> Dict[str, str]:
    try:
        result = service.process_document(pdf_file.read_bytes(), pdf_file.name)
    except ProcessingError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)
    return result.sections


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("extract")
def extract(
    tei_file: Path = typer.Argument(..., help="TEI XML file produced by GROBID."),
    as_json: bool = typer.Option(False, "--json", help="Print sections as JSON."),
) -> None:
    """
    Extract sections from an existing TEI file (no GROBID call).
    """
    _require_file(tei_file, "TEI file")

    try:
        sections = extract_sections_from_tei(tei_file)
    except (OSError, TeiParseError, SectionExtractionError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)

    _print_sections(sections, as_json)


@app.command("process")
def process(
    pdf_file: Path = typer.Argument(..., help="PDF to send to GROBID."),
    as_json: bool = typer.Option(False, "--json", help="Print sections as JSON."),
    grobid_url: Optional[str] = typer.Option(
        None,
        "--grobid-url",
        help="GROBID base URL. Defaults to the configured GROBID_URL.",
    ),
) -> None:
    """
    Run a PDF through GROBID and print the extracted sections.
    """
    _require_file(pdf_file, "PDF")
    sections = _process(_build_service(grobid_url), pdf_file)
    _print_sections(sections, as_json)


@app.command("ask")
def ask(
    pdf_file: Path = typer.Argument(..., help="PDF to send to GROBID."),
    prompt: str = typer.Option(..., "--prompt", "-p", help="Question or instruction for the LLM."),
    section: List[str] = typer.Option(
        [],
        "--section",
        "-s",
        help="Section to include (repeatable). Defaults to every extracted section.",
    ),
    grobid_url: Optional[str] = typer.Option(
        None,
        "--grobid-url",
        help="GROBID base URL. Defaults to the configured GROBID_URL.",
    ),
) -> None:
    """
    Extract sections from a PDF, then ask the LLM about the selected ones.
    """
    _require_file(pdf_file, "PDF")
    service = _build_service(grobid_url)
    sections = _process(service, pdf_file)

    if section:
        missing = [name for name in section if name not in sections]
        if missing:
            console.print(f"[yellow]Sections not found, skipping:[/yellow] {', '.join(missing)}")
        sections = {name: sections[name] for name in section if name in sections}

    if not sections:
        console.print("[red]No sections available to send to the LLM.[/red]")
        raise typer.Exit(code=1)

    try:
        request = LlmRequest(prompt=prompt, sections=sections)
    except ValidationError as exc:
        console.print(f"[red]Invalid LLM request:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    try:
        response = service.process_with_llm(request)
    except LlmClientError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)

    console.print(response.result, markup=False)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind."),
    port: int = typer.Option(8000, "--port", help="Port to listen on."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
) -> None:
    """
    Run the HTTP API with uvicorn.
    """
    import uvicorn

    uvicorn.run("paper_sections.web.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
