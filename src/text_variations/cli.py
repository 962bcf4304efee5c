"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from text_variations.clients.base import TextBackend
from text_variations.clients.llm_client import LLMClient
from text_variations.clients.ollama_client import OllamaClient
from text_variations.config import PROVIDERS, AppConfig, load_config
from text_variations.errors import TextVariationsError, UnsupportedOperation
from text_variations.models.operation import Operation
from text_variations.models.request import GenerationRequest, RankingRequest
from text_variations.models.result import GenerationResult, RankingResult
from text_variations.pipeline.generator import TextGenerator
from text_variations.pipeline.ranker import MAX_CANDIDATES, GenerationRanker, apply_ranking
from text_variations.prompts import build_prompt, default_template

app = typer.Typer(
    name="text-variations",
    help="Transform text with an LLM, generate variations and rank them",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def make_backend(config: AppConfig, provider: str) -> TextBackend:
    """Build the backend client for ``provider`` from config."""
    if provider == "ollama":
        return OllamaClient(
            base_url=config.ollama.base_url,
            model=config.ollama.model,
            timeout=config.ollama.timeout,
            base_temperature=config.llm.base_temperature,
        )
    return LLMClient(
        timeout=config.llm.timeout,
        model=config.llm.model,
        max_tokens=config.llm.max_tokens,
        base_temperature=config.llm.base_temperature,
        max_retries=config.llm.max_retries,
    )


async def _session(
    backend: TextBackend,
    request: GenerationRequest,
    count: int,
    *,
    stream: bool,
    rank_task: str | None,
) -> tuple[list[GenerationResult], RankingResult | None]:
    """Generate, then optionally rank, on one event loop."""
    try:
        results = await TextGenerator(backend, stream=stream).generate_many(request, count)
        ranking = None
        texts = [r.text for r in results if r.ok]
        if rank_task is not None and len(texts) >= 2:
            ranking = await GenerationRanker(backend).rank(
                RankingRequest(task=rank_task, candidates=texts)
            )
        return results, ranking
    finally:
        if isinstance(backend, (LLMClient, OllamaClient)):
            await backend.aclose()


@app.command()
def run(
    text: str = typer.Argument(None, help="Text to transform (or use --file)"),
    file: Path = typer.Option(None, "--file", "-f", help="Read the text from a file"),
    op: str = typer.Option("rephrase", "--op", "-o", help="Operation to apply (see `operations`)"),
    variations: int = typer.Option(None, "--variations", "-n", help="Number of variations"),
    language: str = typer.Option(None, "--language", "-l", help="Target language for translate"),
    prompt: str = typer.Option(None, "--prompt", "-p", help="Custom prompt template with {TEXT}"),
    rank: bool = typer.Option(False, "--rank", help="Rank the variations best to worst"),
    provider: str = typer.Option(None, "--provider", help="Backend: anthropic or ollama"),
    no_stream: bool = typer.Option(False, "--no-stream", help="Wait for complete answers"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Apply an operation to a text and print the variations."""
    _configure_logging(verbose)

    if file is not None:
        if not file.exists():
            console.print(f"[red]File not found: {file}[/red]")
            raise typer.Exit(1)
        text = file.read_text(encoding="utf-8")
    if not text or not text.strip():
        console.print("[red]Please enter some text to process[/red]")
        raise typer.Exit(1)

    try:
        operation = Operation.parse(op)
    except UnsupportedOperation as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)

    config = load_config()
    count = variations if variations is not None else config.generation.variations
    if not 1 <= count <= MAX_CANDIDATES:
        console.print(f"[red]--variations must be between 1 and {MAX_CANDIDATES}[/red]")
        raise typer.Exit(1)
    provider = provider or config.llm.provider
    if provider not in PROVIDERS:
        console.print(f"[red]Unknown provider: {provider}[/red]")
        raise typer.Exit(1)
    if operation.is_translation and not language:
        language = operation.implied_language or config.generation.default_language

    rank_task = None
    if rank:
        try:
            rank_task = build_prompt(
                operation, text.strip(), custom_prompt=prompt, language=language
            )
        except TextVariationsError as exc:
            console.print(f"[red]{escape(str(exc))}[/red]")
            raise typer.Exit(1)

    if verbose:
        console.print(f"[dim]Operation: {operation.value} | variations: {count} | provider: {provider}[/dim]")

    backend = make_backend(config, provider)
    stream = config.generation.stream and not no_stream

    with Live(console=console, transient=True, refresh_per_second=8) as live:

        def on_partial(buffer: str) -> None:
            live.update(Panel(Text(buffer), title=operation.description, border_style="dim"))

        request = GenerationRequest(
            source_text=text,
            operation=operation,
            custom_prompt=prompt,
            target_language=language,
            on_partial=on_partial,
        )
        results, ranking = asyncio.run(
            _session(backend, request, count, stream=stream, rank_task=rank_task)
        )

    for i, result in enumerate(results, 1):
        if result.ok:
            console.print(Panel(Text(result.text), title=f"Variation {i}", border_style="cyan"))
        else:
            console.print(Panel(Text(result.reason), title=f"Variation {i} failed", border_style="red"))

    if verbose and isinstance(backend, LLMClient):
        usage = backend.get_token_summary()
        console.print(
            f"[dim]Tokens: {usage['input']} in / {usage['output']} out over {len(usage['calls'])} calls[/dim]"
        )

    successes = [r.text for r in results if r.ok]
    if not successes:
        raise typer.Exit(1)

    if rank:
        if ranking is None:
            console.print("[yellow]Need at least 2 successful generations to rank[/yellow]")
        elif ranking.ok:
            console.print("\n[bold]== Ranking ==[/bold]\n")
            for position, ranked_text in apply_ranking(successes, ranking.order):
                console.print(Panel(Text(ranked_text), title=f"#{position}", border_style="green"))
        else:
            console.print(f"[red]Ranking failed: {escape(ranking.reason)}[/red]")


@app.command()
def operations() -> None:
    """List the available operations."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Operation")
    table.add_column("Description")
    for operation in Operation:
        table.add_row(operation.value, operation.description)
    console.print(table)


@app.command()
def template(
    op: str = typer.Argument(help="Operation name"),
) -> None:
    """Print an operation's default prompt template."""
    try:
        text = default_template(op)
    except UnsupportedOperation as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)
    typer.echo(text)


if __name__ == "__main__":
    app()
