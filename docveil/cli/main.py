#!/usr/bin/env python3
"""DocVeil CLI - text, PDF and Word document anonymization."""

import functools
import json
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import click

from docveil.core.chunking import TextSegmenter
from docveil.core.config import ChunkingConfig, EngineConfig
from docveil.core.exceptions import DocVeilError
from docveil.core.progress import ProgressEvent
from docveil.engine import AnonymizationEngine
from docveil.formats.parser import parse_document
from docveil.observability.config import LoggingConfig
from docveil.observability.logging import configure_logging
from docveil.oracles.config import PROVIDERS, OracleSettings
from docveil.oracles.registry import OracleRegistry


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Report DocVeil errors as click errors (exit code 1)."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except DocVeilError as e:
            message = e.message
            if e.recovery_suggestions:
                message += "\n" + "\n".join(f"  - {s}" for s in e.recovery_suggestions)
            raise click.ClickException(message) from e

    return wrapper


def _echo_progress(event: ProgressEvent) -> None:
    click.echo(f"[{event.progress:3d}%] {event.message}", err=True)


def _build_engine(ctx: click.Context, parallel: bool) -> AnonymizationEngine:
    config_path: Optional[str] = ctx.obj.get("config")
    settings = (
        OracleSettings.from_file(config_path) if config_path else OracleSettings.from_env()
    )
    chunking = ChunkingConfig.from_environment()
    if ctx.obj.get("chunk_size") is not None:
        chunking.chunk_size = ctx.obj["chunk_size"]
    if ctx.obj.get("chunk_overlap") is not None:
        chunking.chunk_overlap = ctx.obj["chunk_overlap"]

    return AnonymizationEngine(
        registry=OracleRegistry.from_settings(settings),
        chunking_config=chunking,
        engine_config=EngineConfig(execution_mode="parallel" if parallel else "sequential"),
    )


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML file with an 'oracles' section (default: environment variables)",
)
@click.option("--chunk-size", type=click.IntRange(min=1), help="Chunk window size in characters")
@click.option("--chunk-overlap", type=click.IntRange(min=0), help="Overlap between chunks")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    chunk_size: Optional[int],
    chunk_overlap: Optional[int],
    verbose: bool,
) -> None:
    """DocVeil: PII anonymization for text, PDF and Word documents."""
    ctx.ensure_object(dict)
    ctx.obj.update(
        {"config": config, "chunk_size": chunk_size, "chunk_overlap": chunk_overlap}
    )

    if verbose:
        log_config = LoggingConfig.from_env()
        log_config.level = "DEBUG"
        configure_logging(log_config)


@cli.command("anonymize-text")
@click.argument("input_file", type=click.File("r"), default="-")
@click.option(
    "--provider",
    "-p",
    type=click.Choice(PROVIDERS),
    help="Oracle provider (default: DEFAULT_LLM_PROVIDER)",
)
@click.option("--parallel", is_flag=True, help="Send all chunks at once")
@click.option("--progress", is_flag=True, help="Print progress to stderr")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.pass_context
@handle_errors
def anonymize_text(
    ctx: click.Context,
    input_file,
    provider: Optional[str],
    parallel: bool,
    progress: bool,
    as_json: bool,
) -> None:
    """Anonymize plain text read from INPUT_FILE (or stdin)."""
    text = input_file.read()
    engine = _build_engine(ctx, parallel)
    result = engine.anonymize_text(
        text, provider=provider, progress=_echo_progress if progress else None
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        click.echo(result.anonymized_text)


@cli.command("anonymize-docx")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output file path (default: input_anonymized.docx)",
)
@click.option(
    "--provider",
    "-p",
    type=click.Choice(PROVIDERS),
    help="Oracle provider (default: DEFAULT_LLM_PROVIDER)",
)
@click.option("--parallel", is_flag=True, help="Send all chunks at once")
@click.option("--progress", is_flag=True, help="Print progress to stderr")
@click.pass_context
@handle_errors
def anonymize_docx(
    ctx: click.Context,
    input_file: str,
    output: Optional[str],
    provider: Optional[str],
    parallel: bool,
    progress: bool,
) -> None:
    """Anonymize a Word document, keeping all of its formatting."""
    engine = _build_engine(ctx, parallel)
    output_path = engine.anonymize_docx_file(
        Path(input_file),
        output_path=Path(output) if output else None,
        provider=provider,
        progress=_echo_progress if progress else None,
    )
    click.echo(f"✓ Saved anonymized document to: {output_path}")


@cli.command("anonymize-file")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Write the anonymized text here instead of stdout",
)
@click.option(
    "--provider",
    "-p",
    type=click.Choice(PROVIDERS),
    help="Oracle provider (default: DEFAULT_LLM_PROVIDER)",
)
@click.option("--parallel", is_flag=True, help="Send all chunks at once")
@click.option("--progress", is_flag=True, help="Print progress to stderr")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.pass_context
@handle_errors
def anonymize_file(
    ctx: click.Context,
    input_file: str,
    output: Optional[str],
    provider: Optional[str],
    parallel: bool,
    progress: bool,
    as_json: bool,
) -> None:
    """Anonymize the text of a PDF, Word or text file (output is plain text)."""
    engine = _build_engine(ctx, parallel)
    result = engine.anonymize_document(
        Path(input_file),
        provider=provider,
        progress=_echo_progress if progress else None,
    )

    rendered = (
        json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
        if as_json
        else result.anonymized_text
    )
    if output:
        Path(output).write_text(rendered, encoding="utf-8")
        click.echo(f"✓ Saved anonymized text to: {output}")
    else:
        click.echo(rendered)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
@handle_errors
def chunk(ctx: click.Context, input_file: str) -> None:
    """Show how a PDF, Word or text file would be split into chunks."""
    text = parse_document(input_file)

    segmenter = TextSegmenter(
        chunk_size=ctx.obj.get("chunk_size"), chunk_overlap=ctx.obj.get("chunk_overlap")
    )
    chunks = segmenter.chunk(text)
    click.echo(
        json.dumps(
            {
                "chunks": [{"index": c.index, "text": c.text} for c in chunks],
                "statistics": segmenter.get_chunk_statistics(chunks),
            },
            indent=2,
            ensure_ascii=False,
        )
    )


@cli.command("extract-text")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@handle_errors
def extract_text_command(input_file: str) -> None:
    """Print the plain text of a PDF, Word or text file."""
    click.echo(parse_document(input_file), nl=False)


@cli.command()
def version() -> None:
    """Show DocVeil version."""
    from docveil import __version__

    click.echo(f"DocVeil v{__version__}")


def main() -> int:
    """Main entry point."""
    try:
        cli()
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
