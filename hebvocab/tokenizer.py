"""
Hebrew tokenizer and normalizer for vocabulary matching
Extracts Hebrew word runs from free text and expands them into candidate forms
"""

import re
from typing import Iterator, List, Tuple

# Unicode ranges for Hebrew text processing
_HEBREW_BLOCK = "\u0590-\u05ff"  # Letters, points and punctuation of the Hebrew block
_NIQQUD = "\u0591-\u05c7"        # Cantillation marks and vowel points

# Final letter-form -> medial letter-form
FINAL_FORMS = {
    "ך": "כ",
    "ם": "מ",
    "ן": "נ",
    "ף": "פ",
    "ץ": "צ",
}

# Single-letter prefixes: conjunction, article, prepositions, relative
PREFIXES = ("ו", "ה", "ב", "כ", "ל", "מ", "ש")

# Plural, possessive and pronoun suffixes, in lookup order
SUFFIXES = ("ים", "ות", "ה", "י", "ך", "ו", "נו", "כם", "כן", "ם", "ן")

MAX_PREFIX_ROUNDS = 2

_niqqud_re = re.compile(f"[{_NIQQUD}]")
_hebrew_run_re = re.compile(f"[{_HEBREW_BLOCK}]+")
_final_forms_table = str.maketrans(FINAL_FORMS)


def strip_niqqud(text: str) -> str:
    """Remove vowel points and cantillation marks, leaving everything else"""
    return _niqqud_re.sub("", text)


def normalize_final_forms(text: str) -> str:
    """Fold the five final letter-forms into their medial counterparts"""
    return text.translate(_final_forms_table)


def contains_hebrew(text: str) -> bool:
    return bool(_hebrew_run_re.search(text or ""))


def iter_hebrew_spans(text: str) -> Iterator[Tuple[int, int, str]]:
    """
    Yield Hebrew runs with their offsets in the raw text

    Args:
        text: Raw text, possibly pointed and mixed with other scripts

    Yields:
        (start, end, token) where token is the niqqud-free run
    """
    for match in _hebrew_run_re.finditer(text or ""):
        token = strip_niqqud(match.group(0))
        if token:
            yield match.start(), match.end(), token


def tokenize(text: str) -> List[str]:
    """
    Extract Hebrew word tokens from text

    Latin words, digits, punctuation and whitespace are dropped. Repeated
    words are emitted once per occurrence.

    Args:
        text: Text to tokenize

    Returns:
        Niqqud-free Hebrew tokens in source order
    """
    return [token for _, _, token in iter_hebrew_spans(text)]


def normalize_hebrew_word(word: str) -> str:
    """
    Normalize Hebrew word for consistent comparison

    Args:
        word: Hebrew word to normalize

    Returns:
        Word without niqqud, with final forms folded
    """
    return normalize_final_forms(strip_niqqud(word or "")).strip()


def candidate_forms(token: str) -> List[str]:
    """
    Guess the bare forms a surface token may stand for

    The token itself comes first, then its suffix-stripped variants, then up
    to two rounds of single-letter prefix stripping (each followed by suffix
    stripping again). Least-modified forms come first.

    Args:
        token: Hebrew token, pointed or not

    Returns:
        Ordered list of distinct, non-empty forms
    """
    base = normalize_final_forms(strip_niqqud(token))
    forms = {base: None}

    def remove_suffix(form: str):
        for suffix in SUFFIXES:
            if len(form) > len(suffix) + 1 and form.endswith(suffix):
                forms.setdefault(form[:-len(suffix)], None)

    remove_suffix(base)

    trimmed = base
    for _ in range(MAX_PREFIX_ROUNDS):
        prefix = next((p for p in PREFIXES if trimmed.startswith(p)), None)
        if prefix is None or len(trimmed) <= 2:
            break
        trimmed = trimmed[len(prefix):]
        forms.setdefault(trimmed, None)
        remove_suffix(trimmed)

    return [form for form in forms if form]


if __name__ == "__main__":
    # Try with a sample sentence
    test_text = "וְהַיֶּלֶד הָלַךְ לַבַּיִת הַגָּדוֹל."
    tokens = tokenize(test_text)

    print("Tokens:", tokens)
    for token in tokens:
        print(f"  {token}: {candidate_forms(token)}")
