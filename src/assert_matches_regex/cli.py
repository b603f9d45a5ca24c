from __future__ import annotations

from pathlib import Path
import sys

import typer

app = typer.Typer(name="assert-matches-regex", help="Check text against regular expressions")
schema_app = typer.Typer(name="schema", help="Generate match suite schema tooling")
app.add_typer(schema_app, name="schema")


@app.command()
def check(
    haystack: str = typer.Argument(help="Text to search, or '-' with --stdin"),
    pattern: str = typer.Argument(help="Regular expression to search for"),
    message: str | None = typer.Argument(
        None, help="Extra failure message, formatted with ARGS"
    ),
    args: list[str] | None = typer.Argument(None, help="Values for MESSAGE placeholders"),
    stdin: bool = typer.Option(
        False, "--stdin", help="Read the haystack from standard input"
    ),
):
    """Exit 0 if HAYSTACK contains a match for PATTERN, 1 if not, 2 if PATTERN or MESSAGE is invalid."""
    from assert_matches_regex.errors import InvalidPatternError, MatchFailure, MessageTemplateError
    from assert_matches_regex.matching import assert_matches

    if stdin:
        if haystack != "-":
            typer.echo("Error: HAYSTACK must be '-' when --stdin is given", err=True)
            raise typer.Exit(2)
        haystack = sys.stdin.read()

    try:
        assert_matches(haystack, pattern, message, *(args or []))
    except (InvalidPatternError, MessageTemplateError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    except MatchFailure as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)


@app.command()
def escape(text: str = typer.Argument(help="Literal text to escape")):
    """Print TEXT escaped for literal use inside a pattern."""
    from assert_matches_regex.matching import escape as escape_text

    typer.echo(escape_text(text))


@app.command()
def run(
    suite: str = typer.Argument(help="Path to match suite YAML"),
    case: str | None = typer.Option(None, help="Run only this case"),
    output_dir: str = typer.Option("runs", help="Output directory for run results"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
):
    """Run every case of a match suite and write a JUnit report."""
    from pydantic import ValidationError

    from assert_matches_regex.config import load_suite
    from assert_matches_regex.runner import SuiteRunner

    suite_path = Path(suite)
    if not suite_path.exists():
        typer.echo(f"Error: suite file not found: {suite}", err=True)
        raise typer.Exit(1)

    try:
        suite_config = load_suite(suite_path)
    except (ValidationError, ValueError) as e:
        typer.echo(f"Error: invalid suite {suite}:\n{e}", err=True)
        raise typer.Exit(1)

    runner = SuiteRunner(
        suite=suite_config,
        output_dir=Path(output_dir),
        case_filter=case,
        verbose=verbose,
    )

    try:
        run_dir = runner.execute()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    summary = runner.summary
    typer.echo(
        f"Run complete: {summary['passed']}/{summary['total']} passed, "
        f"{summary['failed']} failed, {summary['errors']} errors"
    )
    typer.echo(f"Report: {run_dir / 'junit.xml'}")
    if not verbose:
        typer.echo(f"Debug log: {run_dir / 'debug.log'}")

    if summary["failed"] or summary["errors"]:
        raise typer.Exit(1)


@schema_app.command("generate")
def schema_generate(
    out: str = typer.Option(
        "schemas/match-suite.schema.json", help="Output path for JSON Schema"
    ),
    doc: str = typer.Option("docs/schema.md", help="Output path for schema docs"),
):
    """Generate JSON Schema and docs for the match suite YAML format."""
    from assert_matches_regex.schema import write_schema_files

    out_path = Path(out)
    doc_path = Path(doc)
    write_schema_files(out_path, doc_path)
    typer.echo(f"Schema written: {out_path}")
    typer.echo(f"Docs written: {doc_path}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
