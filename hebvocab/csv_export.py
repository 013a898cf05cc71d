"""
CSV export and console summary of match results for human review
"""

import csv
from pathlib import Path
from typing import Dict, Iterable, List

from rich.console import Console
from rich.table import Table

from hebvocab.tokenizer import candidate_forms
from hebvocab.vocab_matcher import KnownWord, MatchResult, build_index, lookup

console = Console()

HEADER = ['token', 'status', 'translation', 'word_type', 'matched_word', 'word_id']


def match_rows(result: MatchResult, known_words: Iterable[KnownWord]) -> List[Dict[str, str]]:
    """
    Flatten a match result into one row per unique token

    Known rows carry the matched bank word, recovered with the same
    first-hit lookup the matcher uses over the same word bank snapshot.
    """
    index = build_index(known_words)
    known = {entry.hebrew: entry for entry in result.known_vocab}
    rows = []

    for token in result.tokens:
        entry = known.get(token)
        if entry is None:
            rows.append({
                'token': token, 'status': 'unknown', 'translation': '',
                'word_type': '', 'matched_word': '', 'word_id': '',
            })
            continue

        word = lookup(token, index)
        rows.append({
            'token': token,
            'status': 'known',
            'translation': entry.translation,
            'word_type': entry.word_type,
            'matched_word': word.hebrew_text if word else '',
            'word_id': word.identifier if word else '',
        })
    return rows


def export_match_result(result: MatchResult, known_words: Iterable[KnownWord], output_path: Path) -> bool:
    """
    Export a match result to CSV

    Args:
        result: Output of match_text
        known_words: Word bank snapshot the result was matched against
        output_path: Path to output CSV file

    Returns:
        True if export successful
    """
    output_path = Path(output_path)
    rows = match_rows(result, known_words)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=HEADER)
            writer.writeheader()
            writer.writerows(rows)

    except OSError as e:
        console.print(f"[red]Error exporting CSV:[/red] {e}")
        return False

    console.print(f"Exported {len(rows)} tokens to {output_path}")
    return True


def print_match_summary(result: MatchResult, known_words: Iterable[KnownWord], show_forms: bool = False):
    """Print known and unknown tokens as a table"""
    table = Table(title="Vocabulary match")
    table.add_column("Token", justify="right")
    table.add_column("Status")
    table.add_column("Translation")
    table.add_column("Type")
    if show_forms:
        table.add_column("Candidate forms")

    for row in match_rows(result, known_words):
        status = "[green]known[/green]" if row['status'] == 'known' else "[yellow]new[/yellow]"
        cells = [row['token'], status, row['translation'], row['word_type']]
        if show_forms:
            cells.append(", ".join(candidate_forms(row['token'])))
        table.add_row(*cells)

    console.print(table)
    console.print(f"\n[green]{len(result.known_vocab)}[/green] known, "
                  f"[yellow]{len(result.unknown_tokens)}[/yellow] new, "
                  f"{len(result.used_words)} bank words used")
