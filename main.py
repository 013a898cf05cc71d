#!/usr/bin/env python3
"""
hebvocab - Hebrew vocabulary bank and known-word matching for reading practice
"""
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

app = typer.Typer(help="Hebrew vocabulary bank with known/new word matching")
console = Console()


def load_config() -> dict:
    """Load configuration from YAML file"""
    from hebvocab.config import load_config as _load_config
    from hebvocab.errors import ConfigError

    try:
        return _load_config()
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def read_text(text: Optional[str], file: Optional[Path]) -> str:
    """Take text from the argument or from a file"""
    if file is not None:
        if not file.exists():
            console.print(f"[red]Error:[/red] File not found: {file}")
            raise typer.Exit(1)
        return file.read_text(encoding='utf-8')
    if not text:
        console.print("[red]Error:[/red] Provide TEXT or --file")
        raise typer.Exit(1)
    return text


@app.command()
def tokens(
    text: str = typer.Argument(..., help="Text to tokenize"),
    unique: bool = typer.Option(False, help="Drop repeated tokens"),
    forms: bool = typer.Option(False, help="Show candidate forms of each token")
):
    """Show the Hebrew tokens of a text"""
    from hebvocab.tokenizer import candidate_forms
    from hebvocab.vocab_matcher import tokenize_and_normalize

    found = tokenize_and_normalize(text, unique=unique)
    if not found:
        console.print("[yellow]No Hebrew tokens found[/yellow]")
        return

    for token in found:
        if forms:
            console.print(f"{token}: {', '.join(candidate_forms(token))}")
        else:
            console.print(token)


@app.command()
def match(
    text: Optional[str] = typer.Argument(None, help="Hebrew text to match"),
    file: Optional[Path] = typer.Option(None, help="Read text from file"),
    export: Optional[Path] = typer.Option(None, help="Write match rows to CSV"),
    suggest: bool = typer.Option(False, help="Suggest close bank words for new tokens"),
    show_forms: bool = typer.Option(False, help="Show candidate forms in the table"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw match result as JSON")
):
    """Match a text against the word bank"""
    from hebvocab.csv_export import export_match_result, print_match_summary
    from hebvocab.vocab_matcher import count_collisions, match_text, suggest_similar
    from hebvocab.word_store import create_word_store

    config = load_config()
    source = read_text(text, file)

    store = create_word_store(config)
    known_words = store.known_words()
    result = match_text(source, known_words)

    if as_json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    print_match_summary(result, known_words, show_forms=show_forms)

    collisions = count_collisions(known_words)
    if collisions:
        console.print(f"[dim]{collisions} candidate forms shared between bank words (first word wins)[/dim]")

    if suggest and result.unknown_tokens:
        distance = config['matching'].get('suggestion_distance', 1)
        console.print("\n[bold]Suggestions for new tokens:[/bold]")
        for token in result.unknown_tokens:
            suggestions = suggest_similar(token, known_words, max_distance=distance)
            if suggestions:
                listed = ", ".join(f"{w.hebrew_text} ({w.translation}, d={d})" for w, d in suggestions)
                console.print(f"  {token} -> {listed}")

    if export:
        if not export_match_result(result, known_words, export):
            raise typer.Exit(1)


@app.command()
def add_word(
    hebrew: str = typer.Argument(..., help="Hebrew word"),
    translation: str = typer.Argument(..., help="Translation"),
    conjugations: Optional[Path] = typer.Option(None, help="JSON file with conjugation rows (verbs)")
):
    """Add a word to the bank"""
    from hebvocab.errors import DuplicateWordError
    from hebvocab.tokenizer import contains_hebrew
    from hebvocab.word_store import create_word_store

    if not contains_hebrew(hebrew):
        console.print(f"[red]Error:[/red] Not a Hebrew word: {hebrew}")
        raise typer.Exit(1)

    rows = None
    if conjugations is not None:
        try:
            rows = json.loads(conjugations.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            console.print(f"[red]Error reading conjugations:[/red] {e}")
            raise typer.Exit(1)
        if not isinstance(rows, list):
            console.print("[red]Error:[/red] Conjugations file must contain a JSON array")
            raise typer.Exit(1)

    store = create_word_store(load_config())
    try:
        word = store.add_word(hebrew, translation, rows)
    except DuplicateWordError as e:
        console.print(f"[yellow]{e}[/yellow]")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Added {word.hebrew} ({word.translation}) [dim]id {word.id}[/dim]")


@app.command()
def list_words():
    """List the words in the bank, newest first"""
    from rich.table import Table
    from hebvocab.word_store import create_word_store

    store = create_word_store(load_config())
    words = store.list_words()
    if not words:
        console.print("[yellow]Word bank is empty[/yellow]")
        return

    table = Table(title=f"{len(words)} words")
    table.add_column("Hebrew", justify="right")
    table.add_column("Translation")
    table.add_column("Verb")
    table.add_column("Streak")
    table.add_column("Errors")
    table.add_column("ID", style="dim")
    for word in words:
        table.add_row(word.hebrew, word.translation, "✓" if word.conjugations else "",
                      str(word.consecutive_correct), str(word.error_count), word.id)
    console.print(table)


@app.command()
def delete_word(word_id: str = typer.Argument(..., help="Word ID")):
    """Remove a word from the bank"""
    from hebvocab.errors import WordNotFoundError
    from hebvocab.word_store import create_word_store

    store = create_word_store(load_config())
    try:
        word = store.delete_word(word_id)
    except WordNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Deleted {word.hebrew}")


@app.command()
def review(
    word_id: str = typer.Argument(..., help="Word ID"),
    correct: bool = typer.Option(..., "--correct/--wrong", help="Review outcome")
):
    """Record a flashcard review"""
    from hebvocab.errors import WordNotFoundError
    from hebvocab.word_store import create_word_store

    store = create_word_store(load_config())
    try:
        word = store.record_review(word_id, correct)
    except WordNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"{word.hebrew}: streak {word.consecutive_correct}, "
                  f"next review {word.next_review_date:%Y-%m-%d %H:%M}")


@app.command()
def mastery(
    word_id: str = typer.Argument(..., help="Word ID"),
    score: int = typer.Argument(..., help="Mastery score, 0-100"),
    tense: Optional[str] = typer.Option(None, help="Tense (past/present/future) for a pronoun score"),
    pronoun: Optional[str] = typer.Option(None, help="Pronoun code for a pronoun score")
):
    """Set the mastery level of a word, or of one conjugated form"""
    from hebvocab.errors import WordNotFoundError
    from hebvocab.word_store import create_word_store

    if (tense is None) != (pronoun is None):
        console.print("[red]Error:[/red] --tense and --pronoun go together")
        raise typer.Exit(1)

    store = create_word_store(load_config())
    try:
        if tense is None:
            word = store.update_mastery(word_id, score)
            console.print(f"[green]✓[/green] {word.hebrew}: mastery {word.mastery_level}")
        else:
            word = store.update_pronoun_mastery(word_id, tense, pronoun, score)
            console.print(f"[green]✓[/green] {word.hebrew} ({tense}, {pronoun}): "
                          f"mastery {word.mastery[tense][pronoun]}")
    except (WordNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def daily():
    """Show today's practice set: weak, due and new words"""
    from hebvocab.word_store import create_word_store

    store = create_word_store(load_config())
    groups = store.daily_words()
    if not any(groups.values()):
        console.print("[yellow]Word bank is empty[/yellow]")
        return

    for name in ('weak', 'review', 'new'):
        words = groups[name]
        console.print(f"\n[bold]{name.capitalize()} ({len(words)})[/bold]")
        for word in words:
            console.print(f"  {word.hebrew} - {word.translation}")


@app.command()
def store_status():
    """Show status of the word bank"""
    from hebvocab.word_store import create_word_store

    store = create_word_store(load_config())
    store.print_status()


@app.command()
def news(limit: Optional[int] = typer.Option(None, help="Maximum headlines")):
    """Fetch news headlines for reading practice"""
    from hebvocab.errors import FeedError
    from hebvocab.news_feed import fetch_headlines

    config = load_config()
    feed = config['news']
    max_items = limit if limit is not None else feed.get('max_items', 5)
    try:
        items = fetch_headlines(feed['feed_url'], max_items, feed.get('timeout', 10))
    except FeedError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not items:
        console.print("[yellow]No headlines found[/yellow]")
        return

    for item in items:
        console.print(f"[bold]{item.title}[/bold]")
        if item.pub_date:
            console.print(f"  [dim]{item.pub_date}[/dim]")
        console.print(f"  {item.link}")


@app.command()
def define(
    text: Optional[str] = typer.Argument(None, help="Hebrew text"),
    file: Optional[Path] = typer.Option(None, help="Read text from file"),
    limit: Optional[int] = typer.Option(None, help="Maximum unknown tokens sent to the model")
):
    """Match a text, then ask the language model to define the new words"""
    from rich.table import Table
    from hebvocab.errors import LLMError, ModelResponseError
    from hebvocab.llm_client import create_llm_client, define_unknown_words
    from hebvocab.vocab_matcher import match_text
    from hebvocab.word_store import create_word_store

    config = load_config()
    source = read_text(text, file)

    store = create_word_store(config)
    result = match_text(source, store.known_words())
    max_tokens = limit if limit is not None else config['matching'].get('unknown_token_limit', 30)

    try:
        client = create_llm_client(config) if result.unknown_tokens else None
        vocabulary = define_unknown_words(result, client, max_tokens)
    except (LLMError, ModelResponseError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title="Vocabulary")
    table.add_column("Hebrew", justify="right")
    table.add_column("Translation")
    table.add_column("Type")
    table.add_column("Infinitive")
    known = {entry.hebrew for entry in result.known_vocab}
    for entry in vocabulary:
        hebrew = f"[green]{entry.hebrew}[/green]" if entry.hebrew in known else entry.hebrew
        table.add_row(hebrew, entry.translation, entry.word_type, entry.infinitive or "")
    console.print(table)


if __name__ == "__main__":
    app()
