"""
Persistent word bank stored as CSV
Loads the user's vocabulary into memory and hands out read-only snapshots for matching
"""

import csv
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, List, Optional

from rich.console import Console

from hebvocab.errors import DuplicateWordError, WordNotFoundError
from hebvocab.tokenizer import normalize_hebrew_word
from hebvocab.vocab_matcher import KnownWord

console = Console()

FIELDNAMES = [
    'id', 'hebrew', 'translation', 'created_at', 'conjugations',
    'next_review_date', 'consecutive_correct', 'error_count',
    'mastery_level', 'mastery',
]
REQUIRED_FIELDS = ('id', 'hebrew', 'translation', 'created_at')
TENSES = ('past', 'present', 'future')

# Daily practice caps, then minimum sizes topped up from the leftover words
WEAK_LIMIT = 5
REVIEW_LIMIT = 15
NEW_LIMIT = 7
MIN_REVIEW = 8
MIN_NEW = 3
WEAK_ERROR_COUNT = 2


def clamp_score(score: int) -> int:
    return max(0, min(100, int(score)))


@dataclass
class StoredWord:
    """A word in the user's bank"""
    id: str
    hebrew: str
    translation: str
    created_at: datetime
    conjugations: List[dict] = field(default_factory=list)
    next_review_date: Optional[datetime] = None
    consecutive_correct: int = 0
    error_count: int = 0
    mastery_level: int = 0
    mastery: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def to_known_word(self) -> KnownWord:
        return KnownWord(
            hebrew_text=self.hebrew,
            translation=self.translation,
            identifier=self.id,
            has_conjugations=bool(self.conjugations),
        )

    def is_due(self, now: datetime) -> bool:
        return self.next_review_date is None or self.next_review_date <= now


class WordStore:
    """Manages the CSV-backed word bank"""

    def __init__(self, data_dir: Path = Path("data")):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self.words_file = self.data_dir / "words.csv"

        # In-memory storage, keyed by id
        self.words: Dict[str, StoredWord] = {}

        self._load_words()

    def _load_words(self):
        """Load all words from CSV, skipping rows that can't be read"""
        if not self.words_file.exists():
            return

        with open(self.words_file, 'r', encoding='utf-8') as f:
            reader = csv.DictReader(f)
            for line_num, row in enumerate(reader, start=2):
                try:
                    word = self._row_to_word(row)
                except (KeyError, TypeError, ValueError) as e:
                    console.print(f"[yellow]Skipping unreadable row {line_num} in {self.words_file}:[/yellow] {e}")
                    continue
                self.words[word.id] = word

    def _row_to_word(self, row: Dict[str, Optional[str]]) -> StoredWord:
        # DictReader fills the fields of a short row with None
        missing = [name for name in REQUIRED_FIELDS if not row.get(name)]
        if missing:
            raise ValueError(f"missing {', '.join(missing)}")

        conjugations = json.loads(row['conjugations']) if row.get('conjugations') else []
        mastery = json.loads(row['mastery']) if row.get('mastery') else {}
        next_review = row.get('next_review_date')

        return StoredWord(
            id=row['id'],
            hebrew=row['hebrew'],
            translation=row['translation'],
            created_at=datetime.fromisoformat(row['created_at']),
            conjugations=conjugations,
            next_review_date=datetime.fromisoformat(next_review) if next_review else None,
            consecutive_correct=int(row.get('consecutive_correct') or 0),
            error_count=int(row.get('error_count') or 0),
            mastery_level=int(row.get('mastery_level') or 0),
            mastery=mastery,
        )

    def _save_words(self):
        """Rewrite the CSV file with every stored word"""
        with open(self.words_file, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
            writer.writeheader()

            for word in self.words.values():
                writer.writerow({
                    'id': word.id,
                    'hebrew': word.hebrew,
                    'translation': word.translation,
                    'created_at': word.created_at.isoformat(),
                    'conjugations': json.dumps(word.conjugations, ensure_ascii=False) if word.conjugations else '',
                    'next_review_date': word.next_review_date.isoformat() if word.next_review_date else '',
                    'consecutive_correct': word.consecutive_correct,
                    'error_count': word.error_count,
                    'mastery_level': word.mastery_level,
                    'mastery': json.dumps(word.mastery, ensure_ascii=False) if word.mastery else '',
                })

    def _require(self, word_id: str) -> StoredWord:
        word = self.words.get(word_id)
        if word is None:
            raise WordNotFoundError(f"No word with id {word_id}")
        return word

    def list_words(self) -> List[StoredWord]:
        """All words, newest first"""
        return sorted(self.words.values(), key=lambda w: w.created_at, reverse=True)

    def get(self, word_id: str) -> Optional[StoredWord]:
        return self.words.get(word_id)

    def get_by_hebrew(self, hebrew: str) -> Optional[StoredWord]:
        """Find a word by Hebrew text, ignoring niqqud and final forms"""
        key = normalize_hebrew_word(hebrew)
        for word in self.words.values():
            if normalize_hebrew_word(word.hebrew) == key:
                return word
        return None

    def add_word(self, hebrew: str, translation: str,
                 conjugations: Optional[List[dict]] = None) -> StoredWord:
        """
        Add a word to the bank

        Args:
            hebrew: Hebrew text as the user wrote it
            translation: Meaning of the word
            conjugations: Conjugation table rows, for verbs

        Returns:
            The stored word

        Raises:
            DuplicateWordError: a word with the same normalized Hebrew exists
        """
        hebrew = hebrew.strip()
        existing = self.get_by_hebrew(hebrew)
        if existing:
            raise DuplicateWordError(hebrew, existing.id)

        now = datetime.now()
        word = StoredWord(
            id=uuid.uuid4().hex,
            hebrew=hebrew,
            translation=translation.strip(),
            created_at=now,
            conjugations=list(conjugations or []),
            next_review_date=now,
        )
        self.words[word.id] = word
        self._save_words()
        return word

    def delete_word(self, word_id: str) -> StoredWord:
        word = self._require(word_id)
        del self.words[word_id]
        self._save_words()
        return word

    def record_review(self, word_id: str, correct: bool, now: Optional[datetime] = None) -> StoredWord:
        """
        Update spaced-repetition counters after a review

        A correct answer doubles the interval (1, 2, 4... days); a wrong one
        resets the streak and makes the word due immediately.
        """
        word = self._require(word_id)

        now = now or datetime.now()
        if correct:
            word.consecutive_correct += 1
            word.next_review_date = now + timedelta(days=2 ** (word.consecutive_correct - 1))
        else:
            word.consecutive_correct = 0
            word.error_count += 1
            word.next_review_date = now

        self._save_words()
        return word

    def update_mastery(self, word_id: str, level: int) -> StoredWord:
        """Set the overall mastery level of a word, clamped to 0-100"""
        word = self._require(word_id)
        word.mastery_level = clamp_score(level)
        self._save_words()
        return word

    def update_pronoun_mastery(self, word_id: str, tense: str, pronoun_code: str, score: int) -> StoredWord:
        """
        Set the mastery score of one conjugated form

        Args:
            word_id: Word ID
            tense: One of past, present, future
            pronoun_code: Pronoun code of the conjugation row (e.g. "1s")
            score: New score, clamped to 0-100

        Raises:
            WordNotFoundError: no word with this id
            ValueError: unknown tense
        """
        if tense not in TENSES:
            raise ValueError(f"Unknown tense {tense!r}, expected one of {', '.join(TENSES)}")
        word = self._require(word_id)

        word.mastery.setdefault(tense, {})[pronoun_code] = clamp_score(score)
        self._save_words()
        return word

    def due_words(self, now: Optional[datetime] = None) -> List[StoredWord]:
        """Words whose next review date has passed"""
        now = now or datetime.now()
        return [w for w in self.list_words() if w.is_due(now)]

    def daily_words(self, now: Optional[datetime] = None) -> Dict[str, List[StoredWord]]:
        """
        Pick today's practice set

        One pass over the bank, newest first, fills weak words (more than two
        errors), due words and new words (no correct streak) up to their caps.
        Each word lands in at most one group. Leftover words then top up the
        review group to MIN_REVIEW and the new group to MIN_NEW.

        Returns:
            Dict with 'review', 'weak' and 'new' word lists
        """
        now = now or datetime.now()
        weak: List[StoredWord] = []
        review: List[StoredWord] = []
        new: List[StoredWord] = []
        used = set()

        all_words = self.list_words()
        for word in all_words:
            if word.error_count > WEAK_ERROR_COUNT and len(weak) < WEAK_LIMIT and word.id not in used:
                weak.append(word)
                used.add(word.id)
            if word.is_due(now) and len(review) < REVIEW_LIMIT and word.id not in used:
                review.append(word)
                used.add(word.id)
            if word.consecutive_correct == 0 and len(new) < NEW_LIMIT and word.id not in used:
                new.append(word)
                used.add(word.id)

        remaining = [w for w in all_words if w.id not in used]
        while len(review) < MIN_REVIEW and remaining:
            review.append(remaining.pop(0))
        while len(new) < MIN_NEW and remaining:
            new.append(remaining.pop(0))

        return {'review': review, 'weak': weak, 'new': new}

    def known_words(self) -> List[KnownWord]:
        """Snapshot of the bank for matching, newest first"""
        return [word.to_known_word() for word in self.list_words()]

    def get_statistics(self) -> Dict[str, int]:
        """Get statistics about stored words"""
        return {
            'total_words': len(self.words),
            'verbs': sum(1 for w in self.words.values() if w.conjugations),
            'due_for_review': len(self.due_words()),
            'weak_words': sum(1 for w in self.words.values() if w.error_count > WEAK_ERROR_COUNT),
        }

    def print_status(self):
        """Print current status of the word bank"""
        stats = self.get_statistics()

        console.print("\n[bold]WORD BANK STATUS:[/bold]")
        console.print("-" * 40)
        console.print(f"Total words: {stats['total_words']}")
        console.print(f"Verbs: {stats['verbs']}")
        console.print(f"Due for review: {stats['due_for_review']}")
        console.print(f"Weak words: {stats['weak_words']}")
        console.print(f"\nFile: {self.words_file}")


def create_word_store(config: dict) -> WordStore:
    """Create WordStore from configuration"""
    data_dir = Path(config['paths']['data_dir'])
    return WordStore(data_dir)
