"""
Vocabulary matching for Hebrew text
Splits generated text into words the user already knows and new words
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from Levenshtein import distance as levenshtein_distance

from hebvocab.tokenizer import candidate_forms, normalize_hebrew_word, tokenize

DEFAULT_UNKNOWN_LIMIT = 30


@dataclass(frozen=True)
class KnownWord:
    """Read-only snapshot of a word from the user's bank"""
    hebrew_text: str
    translation: str
    identifier: str
    has_conjugations: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "KnownWord":
        """Build from either snake_case or camelCase keys"""
        return cls(
            hebrew_text=data.get('hebrew_text', data.get('hebrewText', data.get('hebrew', ''))),
            translation=data.get('translation', ''),
            identifier=str(data.get('identifier', data.get('id', ''))),
            has_conjugations=bool(data.get('has_conjugations', data.get('hasConjugations', False))),
        )

    def to_dict(self) -> dict:
        return {
            'hebrewText': self.hebrew_text,
            'translation': self.translation,
            'identifier': self.identifier,
            'hasConjugations': self.has_conjugations,
        }


@dataclass(frozen=True)
class VocabEntry:
    """A token of the text paired with its meaning"""
    hebrew: str
    translation: str
    word_type: str  # 'verb', 'noun', 'adjective', 'adverb', 'other'
    infinitive: Optional[str] = None
    phonetic: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            'hebrew': self.hebrew,
            'translation': self.translation,
            'wordType': self.word_type,
        }
        if self.infinitive:
            data['infinitive'] = self.infinitive
        if self.phonetic:
            data['phonetic'] = self.phonetic
        return data


@dataclass
class MatchResult:
    """Known/unknown split of a text against a word bank"""
    tokens: List[str] = field(default_factory=list)
    known_vocab: List[VocabEntry] = field(default_factory=list)
    unknown_tokens: List[str] = field(default_factory=list)
    used_words: List[KnownWord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'tokens': list(self.tokens),
            'knownVocab': [entry.to_dict() for entry in self.known_vocab],
            'unknownTokens': list(self.unknown_tokens),
            'usedWords': [word.to_dict() for word in self.used_words],
        }


def build_index(known_words: Iterable[KnownWord]) -> Dict[str, KnownWord]:
    """
    Map every candidate form of every known word to its owner

    When two words produce the same form, the one listed first keeps it.

    Args:
        known_words: Known words in priority order

    Returns:
        Dictionary mapping candidate form -> KnownWord
    """
    index: Dict[str, KnownWord] = {}
    for word in known_words:
        for form in candidate_forms(word.hebrew_text):
            if form not in index:
                index[form] = word
    return index


def count_collisions(known_words: Iterable[KnownWord]) -> int:
    """Count candidate forms dropped because an earlier word already owned them"""
    owners: Dict[str, str] = {}
    collisions = 0
    for word in known_words:
        for form in candidate_forms(word.hebrew_text):
            if form not in owners:
                owners[form] = word.identifier
            elif owners[form] != word.identifier:
                collisions += 1
    return collisions


def lookup(token: str, index: Dict[str, KnownWord]) -> Optional[KnownWord]:
    """Return the known word behind the least-modified matching form of token"""
    for form in candidate_forms(token):
        word = index.get(form)
        if word is not None:
            return word
    return None


def _unique(tokens: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(tokens))


def match_text(text: str, known_words: Iterable[KnownWord]) -> MatchResult:
    """
    Split the Hebrew words of a text into known and unknown vocabulary

    Args:
        text: Source text (news summary, reading passage...)
        known_words: Snapshot of the user's word bank, in priority order

    Returns:
        MatchResult with unique tokens, known vocabulary, unknown tokens and
        the distinct known words that matched
    """
    tokens = _unique(tokenize(text))
    index = build_index(known_words)

    known_vocab: List[VocabEntry] = []
    unknown_tokens: List[str] = []
    used_words: Dict[str, KnownWord] = {}

    for token in tokens:
        word = lookup(token, index)
        if word is None:
            unknown_tokens.append(token)
            continue

        used_words.setdefault(word.identifier, word)
        known_vocab.append(VocabEntry(
            hebrew=token,
            translation=word.translation,
            word_type='verb' if word.has_conjugations else 'other',
            infinitive=word.hebrew_text if word.has_conjugations else None,
        ))

    return MatchResult(
        tokens=tokens,
        known_vocab=known_vocab,
        unknown_tokens=unknown_tokens,
        used_words=list(used_words.values()),
    )


def tokenize_and_normalize(text: str, unique: bool = False) -> List[str]:
    """Hebrew tokens of text, optionally deduplicated in first-occurrence order"""
    tokens = tokenize(text)
    return _unique(tokens) if unique else tokens


def match_against_vocabulary(text: str, known_words: Iterable[KnownWord]) -> MatchResult:
    return match_text(text, known_words)


def limit_unknown_tokens(tokens: List[str], limit: int = DEFAULT_UNKNOWN_LIMIT) -> List[str]:
    """Keep the first tokens only, to bound the size of a model prompt"""
    if limit < 0:
        return list(tokens)
    return list(tokens[:limit])


def merge_vocabulary(*groups: Iterable[VocabEntry]) -> List[VocabEntry]:
    """Concatenate vocabulary lists, keeping the first entry per Hebrew token"""
    merged: Dict[str, VocabEntry] = {}
    for group in groups:
        for entry in group:
            merged.setdefault(entry.hebrew, entry)
    return list(merged.values())


def suggest_similar(token: str, known_words: Iterable[KnownWord],
                    max_distance: int = 1, max_results: int = 3) -> List[Tuple[KnownWord, int]]:
    """
    Find known words close to an unmatched token using Levenshtein distance

    Only a review aid: match_text never uses it.

    Args:
        token: Token that found no match
        known_words: Word bank snapshot
        max_distance: Largest edit distance to report
        max_results: Maximum number of suggestions

    Returns:
        (KnownWord, distance) pairs sorted by distance, then bank order
    """
    normalized = normalize_hebrew_word(token)
    if not normalized:
        return []

    candidates = []
    for position, word in enumerate(known_words):
        distance = levenshtein_distance(normalized, normalize_hebrew_word(word.hebrew_text))
        if distance <= max_distance:
            candidates.append((distance, position, word))

    candidates.sort(key=lambda c: (c[0], c[1]))
    return [(word, distance) for distance, _, word in candidates[:max_results]]
