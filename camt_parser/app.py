#!/usr/bin/env python3
"""
CLI interface for the CAMT.053 bank statement parser.
"""
import typer
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from camt_parser.core.detectors import NAMESPACE_TO_XSD, detect_document_namespace
from camt_parser.core.errors import Camt053ParserError
from camt_parser.core.runner import Camt053Parser
from camt_parser.models.schema import StatementList, dump_statements
from camt_parser.tools.field_trace import create_field_trace

app = typer.Typer(help="ISO 20022 CAMT.053 Bank Statement Parser")
console = Console()


@app.command()
def parse(
    xml_path: Path = typer.Argument(..., help="Path to CAMT.053 XML file"),
    output: Optional[Path] = typer.Option(None, "--out", "-o", help="Output JSON file path"),
    policy: Optional[Path] = typer.Option(None, "--policy", "-p", help="Field policy YAML file"),
    schema_dir: Optional[Path] = typer.Option(None, "--schema-dir", help="Directory holding the XSD files"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output")
):
    """Parse a CAMT.053 statement file into structured JSON."""

    if not xml_path.exists():
        console.print(f"[red]Error: XML file not found: {xml_path}[/red]")
        raise typer.Exit(1)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        ) as progress:
            task = progress.add_task("Validating document...", total=None)
            parser = Camt053Parser(policy_path=policy, schema_dir=schema_dir, verbose=verbose)

            progress.update(task, description="Extracting statements...")
            statements = parser.parse(xml_path)

        result = dump_statements(statements)
        if output:
            output.write_text(result, encoding="utf-8")
            console.print(f"[green]✓ Parsed {len(statements)} statement(s)! Output written to: {output}[/green]")
        else:
            console.print_json(result)

    except Camt053ParserError as e:
        console.print(f"[red]Error parsing statement: {e}[/red]")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(1)


@app.command()
def detect(
    xml_path: Path = typer.Argument(..., help="Path to CAMT.053 XML file")
):
    """Detect which CAMT.053 version a file declares."""
    try:
        namespace = detect_document_namespace(xml_path)
    except Camt053ParserError as e:
        console.print(f"[red]Error detecting version: {e}[/red]")
        raise typer.Exit(1)

    if namespace in NAMESPACE_TO_XSD:
        console.print(f"[green]Detected namespace: {namespace}[/green]")
        console.print(f"Schema: {NAMESPACE_TO_XSD[namespace]}")
    else:
        console.print(f"[red]Unsupported or missing namespace: {namespace or '(none)'}[/red]")
        raise typer.Exit(1)


@app.command()
def validate(
    json_path: Path = typer.Argument(..., help="Path to JSON file to validate")
):
    """Validate a JSON file against the output schema."""
    try:
        statements = StatementList.validate_json(json_path.read_text(encoding="utf-8"))
    except ValueError as e:
        console.print(f"[red]Validation failed: {e}[/red]")
        raise typer.Exit(1)

    console.print("[green]✓ JSON is valid[/green]")
    console.print(f"Statements: {len(statements)}")
    for statement in statements:
        console.print(
            f"{statement.title} | {statement.account_identifier or '-'} | "
            f"{statement.statement_date or '-'} | transactions: {len(statement.transactions)}"
        )


@app.command()
def samples(
    samples_dir: Path = typer.Argument(..., help="Directory of CAMT.053 XML files"),
    schema_dir: Optional[Path] = typer.Option(None, "--schema-dir", help="Directory holding the XSD files")
):
    """Parse every XML file in a directory, reporting each result."""
    files = sorted(samples_dir.glob("*.xml"))
    if not files:
        console.print(f"[red]No XML files found in: {samples_dir}[/red]")
        raise typer.Exit(1)

    parser = Camt053Parser(schema_dir=schema_dir)
    failures = 0
    for xml_file in files:
        console.print(f"\n[bold]=== Parsing: {xml_file.name} ===[/bold]")
        try:
            console.print_json(dump_statements(parser.parse(xml_file)))
        except Camt053ParserError as e:
            failures += 1
            console.print(f"[red]Error: {e}[/red]")

    if failures:
        console.print(f"\n[yellow]{failures} of {len(files)} file(s) failed[/yellow]")


@app.command()
def trace(
    xml_path: Path = typer.Argument(..., help="Path to CAMT.053 XML file"),
    policy: Optional[Path] = typer.Option(None, "--policy", "-p", help="Field policy YAML file"),
    schema_dir: Optional[Path] = typer.Option(None, "--schema-dir", help="Directory holding the XSD files")
):
    """Show which source location supplied each transaction field."""
    try:
        create_field_trace(xml_path, console, policy_path=policy, schema_dir=schema_dir)
    except Camt053ParserError as e:
        console.print(f"[red]Error tracing statement: {e}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
