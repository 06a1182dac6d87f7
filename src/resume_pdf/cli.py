"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from resume_pdf.config import AppConfig, load_config
from resume_pdf.errors import ResumeGeneratorError, exit_code_for
from resume_pdf.export.multi_format import SUPPORTED_FORMATS, generate_multiple_formats
from resume_pdf.export.output_path import generate_output_path
from resume_pdf.export.pdf import PDFGenerator, generate_pdf
from resume_pdf.models.options import DEFAULT_TEMPLATE, DeterminismConfig, RenderOptions
from resume_pdf.templates.offline_check import check_offline_compatibility
from resume_pdf.templates.renderer import AVAILABLE_TEMPLATES, TEMPLATE_ALIASES, HTMLRenderer
from resume_pdf.utils.file_watcher import FileWatcher
from resume_pdf.utils.json_update import apply_updates
from resume_pdf.validators.resume_validator import load_resume

app = typer.Typer(
    name="resume-pdf",
    help="Generate ATS-friendly, reproducible PDF resumes from JSON",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _fail(error: ResumeGeneratorError, title: str, debug: bool = False) -> None:
    console.print(Panel(error.formatted_message(debug=debug), title=title, border_style="red"))
    if error.is_catastrophic:
        console.print("[bold red]This is a catastrophic error that needs immediate attention.[/bold red]")
    raise typer.Exit(exit_code_for(error))


@app.command()
def generate(
    input_file: Path = typer.Argument(help="JSON resume file"),
    output: Path = typer.Option(None, "--output", "-o", help="Output PDF path"),
    template: str = typer.Option(DEFAULT_TEMPLATE, "--template", "-t", help="Template name"),
    ats_mode: bool = typer.Option(False, "--ats-mode", help="Suppress decorative styling"),
    timestamp: bool = typer.Option(False, "--timestamp", help="Add the date to the filename"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing output file"),
    deterministic: bool = typer.Option(
        True, "--deterministic/--no-deterministic", help="Strip run-specific PDF metadata"
    ),
    creation_date: str = typer.Option(
        None, "--creation-date", help="Fixed creation date, e.g. D:20240101000000+00'00'"
    ),
    watch: bool = typer.Option(False, "--watch", "-w", help="Regenerate whenever the input changes"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Generate a PDF resume."""
    _setup_logging(verbose)
    if not input_file.exists():
        console.print(f"[red]File not found: {input_file}[/red]")
        raise typer.Exit(1)

    config = load_config()
    try:
        output_path = generate_output_path(
            input_file,
            output,
            template=template,
            ats_mode=ats_mode,
            timestamp=timestamp,
            force=force,
        )
        options = RenderOptions(
            template=template,
            ats_mode=ats_mode,
            deterministic=deterministic,
            determinism=DeterminismConfig(fixed_creation_date=creation_date),
            output=output_path,
        )
        if watch:
            try:
                asyncio.run(_watch(input_file, options, config))
            except KeyboardInterrupt:
                console.print("\n[yellow]Stopped watching[/yellow]")
            return
        resume = load_resume(input_file)
        with console.status("Generating PDF..."):
            path = asyncio.run(generate_pdf(resume, options, config))
    except ResumeGeneratorError as err:
        _fail(err, "PDF generation failed", debug=verbose)
    except ValueError as err:
        console.print(f"[red]{err}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]PDF generated: {path}[/green]")


async def _watch(input_file: Path, options: RenderOptions, config: AppConfig) -> None:
    """Generate once, then again after every settled change to input_file."""
    async with PDFGenerator(config) as generator:

        async def regenerate() -> None:
            resume = load_resume(input_file)
            path = await generator.generate(resume, options)
            console.print(f"[green]PDF updated: {path}[/green]")

        def report(error: Exception) -> None:
            message = error.formatted_message() if isinstance(error, ResumeGeneratorError) else str(error)
            console.print(Panel(message, title="Regeneration failed", border_style="red"))

        try:
            await regenerate()
        except Exception as exc:
            report(exc)

        watcher = FileWatcher(input_file, regenerate, on_error=report)
        console.print(f"[blue]Watching {input_file} for changes (Ctrl+C to stop)[/blue]")
        await watcher.run()


@app.command()
def export(
    input_file: Path = typer.Argument(help="JSON resume file"),
    formats: list[str] = typer.Option(None, "--format", "-f", help="pdf, html or txt (repeatable)"),
    output_dir: Path = typer.Option(None, "--output-dir", "-d", help="Output directory"),
    base_name: str = typer.Option(None, "--base-name", help="Base filename"),
    template: str = typer.Option(DEFAULT_TEMPLATE, "--template", "-t", help="Template name"),
    ats_mode: bool = typer.Option(False, "--ats-mode", help="Suppress decorative styling"),
    timestamp: bool = typer.Option(False, "--timestamp", help="Add the date to filenames"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Export a resume to several formats at once."""
    _setup_logging(verbose)
    config = load_config()
    formats = formats or list(config.output.formats)
    unknown = [f for f in formats if f not in SUPPORTED_FORMATS]
    if unknown:
        console.print(f"[red]Unsupported format(s): {', '.join(unknown)}[/red]")
        raise typer.Exit(1)

    try:
        with console.status("Exporting..."):
            results = asyncio.run(
                generate_multiple_formats(
                    input_file,
                    formats,
                    output_dir or config.output.resolved_directory,
                    base_name=base_name,
                    template=template,
                    ats_mode=ats_mode,
                    timestamp=timestamp,
                    config=config,
                )
            )
    except ResumeGeneratorError as err:
        _fail(err, "Export failed", debug=verbose)

    table = Table(title="Export results")
    table.add_column("Format")
    table.add_column("File")
    table.add_column("Status")
    for r in results:
        status = "[green]ok[/green]" if r.success else f"[red]{r.error}[/red]"
        table.add_row(r.format, str(r.file_path or "-"), status)
    console.print(table)
    if not all(r.success for r in results):
        raise typer.Exit(1)


@app.command()
def update(
    input_file: Path = typer.Argument(help="JSON resume file"),
    assignments: list[str] = typer.Option(
        None, "--set", "-s", help="field=value in dot notation, e.g. basics.label=Engineer (repeatable)"
    ),
    add_work: str = typer.Option(
        None, "--add-work", help="JSON object added as the most recent work entry"
    ),
    backup: bool = typer.Option(True, "--backup/--no-backup", help="Keep a .bak copy of the old file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Edit fields of a resume JSON file in place."""
    _setup_logging(verbose)
    if not assignments and add_work is None:
        console.print("[red]Nothing to update: pass --set or --add-work[/red]")
        raise typer.Exit(1)

    try:
        entry = json.loads(add_work) if add_work is not None else None
        saved = apply_updates(input_file, assignments, add_work=entry, backup=backup)
    except ResumeGeneratorError as err:
        _fail(err, "Update failed", debug=verbose)
    except ValueError as err:
        console.print(f"[red]{err}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Updated {input_file}[/green]")
    if saved is not None:
        console.print(f"[dim]Backup created: {saved}[/dim]")


@app.command()
def validate(
    input_file: Path = typer.Argument(help="JSON resume file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Validate a resume against the schema."""
    _setup_logging(verbose)
    try:
        resume = load_resume(input_file)
    except ResumeGeneratorError as err:
        _fail(err, "Validation failed", debug=verbose)

    console.print(f"[green]{input_file} is valid[/green]")
    console.print(
        f"[dim]{len(resume.work)} work, {len(resume.education)} education, "
        f"{len(resume.skills)} skill groups, {len(resume.projects)} projects[/dim]"
    )


@app.command()
def templates() -> None:
    """List the built-in templates."""
    for name in AVAILABLE_TEMPLATES:
        aliases = [a for a, target in TEMPLATE_ALIASES.items() if target == name]
        default = " (default)" if name == DEFAULT_TEMPLATE else ""
        alias_text = f" [dim]aliases: {', '.join(aliases)}[/dim]" if aliases else ""
        console.print(f"  [bold]{name}[/bold]{default}{alias_text}")


@app.command("check-offline")
def check_offline(
    input_file: Path = typer.Argument(help="JSON resume file"),
    template: str = typer.Option(DEFAULT_TEMPLATE, "--template", "-t", help="Template name"),
    ats_mode: bool = typer.Option(False, "--ats-mode", help="Suppress decorative styling"),
) -> None:
    """Render HTML and report anything that would need the network."""
    try:
        resume = load_resume(input_file)
    except ResumeGeneratorError as err:
        _fail(err, "Validation failed")

    try:
        html = HTMLRenderer(offline_check=False).render(
            resume, RenderOptions(template=template, ats_mode=ats_mode)
        )
    except ResumeGeneratorError as err:
        _fail(err, "Rendering failed")
    report = check_offline_compatibility(html)
    for issue in report.issues:
        console.print(f"  [red]- {issue}[/red]")
    for warning in report.warnings:
        console.print(f"  [yellow]- {warning}[/yellow]")
    if report.is_offline_compatible:
        console.print("[green]Rendered HTML is offline compatible[/green]")
    else:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
