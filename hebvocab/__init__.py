"""
hebvocab - Hebrew known-word matching for vocabulary practice
"""
from hebvocab.tokenizer import candidate_forms, normalize_final_forms, strip_niqqud, tokenize
from hebvocab.vocab_matcher import (
    KnownWord,
    MatchResult,
    VocabEntry,
    build_index,
    match_against_vocabulary,
    match_text,
    tokenize_and_normalize,
)

__version__ = "0.1.0"
