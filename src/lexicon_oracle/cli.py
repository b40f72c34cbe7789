# SPDX-License-Identifier: Apache-2.0
"""Command line interface for Lexicon Oracle."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .audit import DEFAULT_LENGTHS, DEFAULT_SEEDS, run_audit, write_reports
from .config import OracleConfig, load_config
from .dictionary import build_dictionary_file, load_vocabulary
from .errors import VocabularyUnavailable
from .logging import configure_logging, get_logger
from .oracle import SIZE_LENGTHS, GenerationMode, Oracle, PredictOptions

LOGGER = get_logger(__name__)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Path to oracle configuration (YAML or JSON).",
)
DICTIONARY_OPTION = typer.Option(
    None,
    "--dictionary",
    help="Dictionary file; defaults to the configured path.",
)
OUTPUT_OPTION = typer.Option(
    None,
    "--output",
    help="Where to write the dictionary; defaults to the configured path.",
)
MIN_COUNT_OPTION = typer.Option(
    None,
    "--min-count",
    min=1,
    help="Minimum occurrences for a word to enter the dictionary.",
)
MODE_OPTION = typer.Option(
    None,
    "--mode",
    help="Generation strategy: ranked, sampled or delegated.",
)
LENGTH_OPTION = typer.Option(
    None,
    "--length",
    min=1,
    help="Target number of words.",
)
SIZE_OPTION = typer.Option(
    None,
    "--size",
    help="Default length preset when --length is omitted: short or long.",
)
TEMPERATURE_OPTION = typer.Option(
    None,
    "--temperature",
    help="Sampling temperature (> 0).",
)
MODEL_OPTION = typer.Option(
    None,
    "--model",
    help="External model identifier for delegated mode.",
)
JSON_OPTION = typer.Option(
    False,
    "--json",
    help="Print the full result as JSON.",
)
SEED_OPTION = typer.Option(
    None,
    "--seed",
    help="Seed phrase to audit; repeat for several.",
)
LENGTHS_OPTION = typer.Option(
    None,
    "--length",
    help="Length to audit; repeat for several.",
)
JSON_REPORT_OPTION = typer.Option(
    None,
    "--json-report",
    help="Optional path to write the audit as JSON.",
)
MARKDOWN_REPORT_OPTION = typer.Option(
    None,
    "--markdown-report",
    help="Optional path to write the audit as Markdown.",
)
TOP_OPTION = typer.Option(
    20,
    "--top",
    min=1,
    help="Number of dictionary entries to show.",
)

app = typer.Typer(
    help="Build frequency dictionaries and generate vocabulary-constrained predictions."
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


def _load(config_path: Optional[Path], dictionary: Optional[Path]) -> tuple[Oracle, OracleConfig]:
    config = load_config(config_path)
    oracle = Oracle.from_config(config, dictionary_path=dictionary)
    return oracle, config


def _options(
    config: OracleConfig,
    mode: Optional[str],
    length: Optional[int],
    size: Optional[str],
    temperature: Optional[float],
    model: Optional[str],
) -> PredictOptions:
    defaults = config.generator
    size = size or defaults.size
    if size not in SIZE_LENGTHS:
        raise typer.BadParameter(f"size must be one of {', '.join(SIZE_LENGTHS)}, got {size!r}")
    if temperature is not None and not temperature > 0:
        raise typer.BadParameter(f"temperature must be positive, got {temperature}")
    try:
        return PredictOptions(
            length=length if length is not None else defaults.length,
            size=size,
            mode=GenerationMode.parse(mode or defaults.mode),
            temperature=temperature,
            model=model,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def build(
    corpus: Path = typer.Argument(..., help="Plain-text corpus to count."),
    output: Optional[Path] = OUTPUT_OPTION,
    min_count: Optional[int] = MIN_COUNT_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
) -> None:
    """Count corpus words and write the dictionary file."""

    config = load_config(config_path)
    target = output or config.dictionary.path
    try:
        dictionary = build_dictionary_file(corpus, target, min_count or config.dictionary.min_count)
    except FileNotFoundError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    if dictionary.warning:
        typer.echo(f"Warning: {dictionary.warning}", err=True)
    typer.echo(f"Wrote {target} with {len(dictionary)} entries")


@app.command()
def predict(
    seed: str = typer.Argument("", help="Seed phrase; its words are always allowed."),
    mode: Optional[str] = MODE_OPTION,
    length: Optional[int] = LENGTH_OPTION,
    size: Optional[str] = SIZE_OPTION,
    temperature: Optional[float] = TEMPERATURE_OPTION,
    model: Optional[str] = MODEL_OPTION,
    as_json: bool = JSON_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
    dictionary: Optional[Path] = DICTIONARY_OPTION,
) -> None:
    """Generate one constrained sentence for ``seed``."""

    oracle, config = _load(config_path, dictionary)
    options = _options(config, mode, length, size, temperature, model)
    try:
        result = oracle.predict(seed, options)
    except VocabularyUnavailable as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    if as_json:
        typer.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return
    typer.echo(result.text)
    if result.warning:
        typer.echo(f"Warning: {result.warning}", err=True)


@app.command()
def audit(
    seeds: Optional[List[str]] = SEED_OPTION,
    lengths: Optional[List[int]] = LENGTHS_OPTION,
    mode: Optional[str] = MODE_OPTION,
    temperature: Optional[float] = TEMPERATURE_OPTION,
    model: Optional[str] = MODEL_OPTION,
    json_report: Optional[Path] = JSON_REPORT_OPTION,
    markdown_report: Optional[Path] = MARKDOWN_REPORT_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
    dictionary: Optional[Path] = DICTIONARY_OPTION,
) -> None:
    """Check that predictions stay inside the vocabulary for several seeds and lengths."""

    oracle, config = _load(config_path, dictionary)
    options = _options(config, mode, None, None, temperature, model)
    try:
        report = run_audit(oracle, seeds or DEFAULT_SEEDS, lengths or DEFAULT_LENGTHS, options)
    except VocabularyUnavailable as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    for case in report.cases:
        typer.echo(f"{case.status_text()} {case.label}: {case.notes.get('text', '')}")
        if case.notes.get("warning"):
            typer.echo(f"  warning: {case.notes['warning']}")
    summary = report.summary
    typer.echo(f"{summary.passed}/{summary.total} passed ({summary.pass_rate}%), {summary.fallbacks} fallbacks")
    write_reports(report, json_path=json_report, markdown_path=markdown_report)
    if summary.failed:
        raise typer.Exit(code=2)


@app.command()
def inspect(
    top: int = TOP_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
    dictionary: Optional[Path] = DICTIONARY_OPTION,
) -> None:
    """Show the most frequent dictionary entries."""

    config = load_config(config_path)
    path = dictionary or config.dictionary.path
    vocabulary = load_vocabulary(path)
    if vocabulary.is_empty:
        typer.echo(f"Error: no words found in {path}", err=True)
        raise typer.Exit(code=1)
    console = Console()
    table = Table(title=f"{path} ({len(vocabulary)} words)")
    table.add_column("Rank", justify="right")
    table.add_column("Word")
    table.add_column("Count", justify="right")
    for rank, (word, count) in enumerate(vocabulary.most_common(top), start=1):
        table.add_row(str(rank), word, str(count))
    console.print(table)


if __name__ == "__main__":
    app()
