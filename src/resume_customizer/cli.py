"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
import webbrowser
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from resume_customizer.config import load_config
from resume_customizer.errors import (
    ArchiveError,
    ConfigurationError,
    ExtractionError,
    PDFGenerationError,
    SSRFError,
    ValidationError,
)
from resume_customizer.export import render_html_preview, render_pdf
from resume_customizer.logging import RunStore
from resume_customizer.models.customization import CustomizationRequest, DisplayConfig
from resume_customizer.models.resume import load_mother_resume, load_resume
from resume_customizer.parsers.jd_parser import load_jd_file, safe_filename
from resume_customizer.parsers.url_extractor import fetch_job_description
from resume_customizer.pipeline.budget import budget_report, compute_item_budget, compute_word_budget
from resume_customizer.pipeline.customizer import create_customizer
from resume_customizer.pipeline.prompt_builder import PROMPT_STYLES
from resume_customizer.storage.archive_store import ArchiveStore

app = typer.Typer(
    name="resume-customizer",
    help="Tailor a base resume to a job description with an LLM",
    no_args_is_help=True,
)
archive_app = typer.Typer(help="Manage archived resume variants", no_args_is_help=True)
app.add_typer(archive_app, name="archive")
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _fail(message: str) -> None:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def _load_base(resume: Path | None):
    if resume is None:
        return load_mother_resume()
    if not resume.exists():
        _fail(f"Resume file not found: {resume}")
    return load_resume(resume)


@app.command()
def customize(
    jd: Path = typer.Option(..., "--jd", help="Job description text file"),
    resume: Path = typer.Option(None, "--resume", help="Base resume JSON (default: bundled mother resume)"),
    style: str = typer.Option(None, "--style", "-s", help="Named style (see `styles`)"),
    prompt: Path = typer.Option(None, "--prompt", help="Free-text instructions file, overrides --style"),
    provider: str = typer.Option(None, "--provider", "-p", help="openai | anthropic | google | ollama"),
    output: Path = typer.Option(None, "--output", "-o", help="Output JSON path"),
    html: bool = typer.Option(False, "--html", help="Also write and open an HTML preview"),
    archive: str = typer.Option(None, "--archive", help="Save the result to the archive under this label"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Customize the base resume for a job description."""
    _setup_logging(verbose)
    if not jd.exists():
        _fail(f"Job description file not found: {jd}")

    config = load_config()
    base = _load_base(resume)
    request = CustomizationRequest(
        job_description=load_jd_file(jd),
        base=base,
        instructions=prompt.read_text(encoding="utf-8") if prompt else None,
        style=style or config.pipeline.default_style,
    )

    run_store = RunStore(config.storage.resolved_db_path)
    try:
        customizer = create_customizer(config, provider=provider, run_store=run_store)
        with console.status(f"Customizing with {customizer.provider.name}..."):
            result = asyncio.run(customizer.customize(request))
    except (ConfigurationError, ValidationError) as e:
        _fail(str(e))

    if output is None:
        output = Path("output") / safe_filename(result.company_or_role).replace(".pdf", ".json")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.resume.to_json(), encoding="utf-8")

    color = "yellow" if result.fallback_used else "green"
    console.print(
        Panel(
            f"{result.reasoning}\n"
            f"Company/role: {result.company_or_role or '-'}\n"
            f"Title: {result.config.title_bar.main}",
            title=f"[{color}]{'Fallback' if result.fallback_used else 'AI'} result[/{color}]",
        )
    )
    console.print(f"[green]Saved: {output}[/green]")

    if html:
        html_path = output.with_suffix(".html")
        html_path.write_text(
            render_html_preview(result.resume, result.config, config.export.theme),
            encoding="utf-8",
        )
        console.print(f"[green]HTML saved: {html_path}[/green]")
        webbrowser.open(html_path.resolve().as_uri())

    if archive:
        item = ArchiveStore(config.storage.resolved_db_path).save(archive, result.resume, result.config)
        console.print(f"[green]Archived as #{item.id}[/green]")


@app.command()
def budget(
    resume: Path = typer.Option(None, "--resume", help="Base resume JSON"),
    generated: Path = typer.Option(None, "--generated", "-g", help="Generated resume JSON to compare"),
    multiplier: float = typer.Option(None, "--multiplier", "-m", help="Word budget multiplier"),
) -> None:
    """Show word and item budgets, optionally against a generated resume."""
    config = load_config()
    base = _load_base(resume)
    words = compute_word_budget(base, multiplier or config.pipeline.word_multiplier)

    table = Table(title="Word budget")
    table.add_column("Section")
    table.add_column("Limit", justify="right")
    if generated:
        table.add_column("Original", justify="right")
        table.add_column("Generated", justify="right")
        table.add_column("Truncated", justify="right")
        other = json.loads(generated.read_text(encoding="utf-8"))
        for row in budget_report(base, other, words):
            mark = "[red]" if row.over else ""
            table.add_row(
                row.section, str(row.limit), str(row.original),
                f"{mark}{row.generated}", str(row.truncated),
            )
    else:
        for section, limit in words.items():
            table.add_row(section, str(limit))
    console.print(table)

    items = Table(title="Item budget")
    items.add_column("List")
    items.add_column("Max items", justify="right")
    for section, limit in compute_item_budget(base).items():
        items.add_row(section, str(limit))
    console.print(items)


@app.command()
def styles() -> None:
    """List the named prompt styles."""
    for style in PROMPT_STYLES.values():
        console.print(f"  [bold]{style.id}[/bold]: {style.name} - {style.description}")


@app.command()
def pdf(
    file: Path = typer.Argument(help="Resume JSON to render"),
    output: Path = typer.Option(None, "--output", "-o", help="Output PDF path"),
    theme: str = typer.Option(None, "--theme", help="professional | modern | minimal"),
    strategy: str = typer.Option(None, "--strategy", help="layout | browser"),
    label: str = typer.Option(None, "--label", help="Company or role for the file name"),
) -> None:
    """Render a resume JSON file to PDF."""
    config = load_config()
    document = _load_base(file)
    try:
        data = asyncio.run(
            render_pdf(
                document,
                DisplayConfig(),
                theme=theme or config.export.theme,
                strategy=strategy or config.export.strategy,
            )
        )
    except PDFGenerationError as e:
        _fail(str(e))

    output = output or Path(safe_filename(label))
    output.write_bytes(data)
    console.print(f"[green]PDF saved: {output}[/green]")


@app.command("extract-url")
def extract_url(
    url: str = typer.Argument(help="Job posting URL"),
    output: Path = typer.Option(None, "--output", "-o", help="Save the text to a file"),
) -> None:
    """Fetch a job posting and print its text."""
    try:
        with console.status("Fetching job posting..."):
            posting = asyncio.run(fetch_job_description(url))
    except SSRFError as e:
        _fail(f"Blocked URL: {e}")
    except (ValueError, ExtractionError) as e:
        _fail(str(e))

    if output:
        output.write_text(posting.content, encoding="utf-8")
        console.print(f"[green]Saved: {output}[/green]")
    else:
        console.print(Panel(posting.content, title=posting.metadata.get("title", url)))


@archive_app.command("list")
def archive_list() -> None:
    """List archived resumes."""
    store = ArchiveStore(load_config().storage.resolved_db_path)
    items = store.list()
    if not items:
        console.print("[yellow]The archive is empty.[/yellow]")
        return
    table = Table()
    table.add_column("ID", justify="right")
    table.add_column("Label")
    table.add_column("Date")
    table.add_column("Current")
    for item in items:
        table.add_row(
            str(item.id), item.label, item.date.strftime("%Y-%m-%d %H:%M"),
            "*" if item.is_current else "",
        )
    console.print(table)


@archive_app.command("save")
def archive_save(
    file: Path = typer.Argument(help="Resume JSON to archive"),
    label: str = typer.Option(..., "--label", "-l", help="Archive label"),
) -> None:
    store = ArchiveStore(load_config().storage.resolved_db_path)
    try:
        item = store.save(label, _load_base(file))
    except ArchiveError as e:
        _fail(str(e))
    console.print(f"[green]Archived as #{item.id}[/green]")


@archive_app.command("set-current")
def archive_set_current(item_id: int = typer.Argument(help="Archive item ID")) -> None:
    """Mark an archived resume as the current one."""
    store = ArchiveStore(load_config().storage.resolved_db_path)
    try:
        item = store.set_current(item_id)
    except ArchiveError as e:
        _fail(str(e))
    console.print(f"[green]Current resume: #{item.id} {item.label}[/green]")


@archive_app.command("delete")
def archive_delete(item_id: int = typer.Argument(help="Archive item ID")) -> None:
    store = ArchiveStore(load_config().storage.resolved_db_path)
    try:
        store.delete(item_id)
    except ArchiveError as e:
        _fail(str(e))
    console.print(f"[green]Deleted #{item_id}[/green]")


@app.command()
def settings(
    target_pages: int = typer.Option(None, "--target-pages", help="Set the target page count"),
) -> None:
    """Show or change user settings."""
    config = load_config()
    store = ArchiveStore(config.storage.resolved_db_path)
    if target_pages is not None:
        store.set_target_pages(target_pages)
    stats = RunStore(config.storage.resolved_db_path).get_stats()
    console.print(
        Panel(
            f"Target pages: {store.get_target_pages()}\n"
            f"Provider: {config.llm.provider} | Style: {config.pipeline.default_style} | "
            f"Theme: {config.export.theme}\n"
            f"Runs: {stats['total_runs']} | Fallback rate: {stats['fallback_rate']:.0f}%",
            title="Settings",
        )
    )


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    _setup_logging(verbose)
    uvicorn.run(
        "resume_customizer.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        log_level="debug" if verbose else "info",
    )


if __name__ == "__main__":
    app()
