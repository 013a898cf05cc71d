"""
Prompts asking a language model to define the words the matcher didn't recognise,
and parsing of its answers
"""
import json
from typing import Iterable, List

from hebvocab.errors import ModelResponseError
from hebvocab.vocab_matcher import KnownWord, VocabEntry

SYSTEM_PROMPT = (
    "You are a Hebrew language expert and educational content creator. "
    "Always respond with valid JSON only, no markdown, no code blocks, just pure JSON."
)

WORD_TYPES = ("verb", "noun", "adjective", "adverb", "other")


def build_word_list_text(known_words: Iterable[KnownWord]) -> str:
    """Vocabulary hint listing the user's words, for generation prompts"""
    lines = [f"- {word.hebrew_text} ({word.translation})" for word in known_words]
    if not lines:
        return "The user has no words in their vocabulary yet."
    return ("Here are some Hebrew words from the user's vocabulary "
            "(prefer using these when possible):\n" + "\n".join(lines))


def build_vocab_prompt(tokens: List[str]) -> str:
    """
    Ask for definitions of the given tokens only

    Args:
        tokens: Unknown tokens, already truncated by the caller

    Returns:
        Prompt text
    """
    token_lines = "\n".join(f"- {token}" for token in tokens)
    return f"""You will receive a list of Hebrew tokens taken from a short news summary.
For each token, return a JSON array of vocabulary entries with:
- "hebrew": the original token as given
- "infinitive": the verb infinitive if the token is a verb, otherwise omit
- "translation": Spanish translation of the token (or its base meaning)
- "phonetic": Spanish pronunciation phonetics
- "wordType": one of {", ".join(f'"{t}"' for t in WORD_TYPES)}

Tokens (do not add new tokens):
{token_lines}

Return ONLY valid JSON with this exact structure:
{{
  "vocabularyWords": [
    {{
      "hebrew": "token",
      "translation": "traducción",
      "phonetic": "fonética",
      "wordType": "noun",
      "infinitive": "לכתוב"
    }}
  ]
}}"""


def extract_json_object(content: str) -> str:
    """Cut away anything the model put around the outermost braces"""
    cleaned = (content or "").strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        cleaned = cleaned[start:end + 1]
    return cleaned


def parse_vocab_response(content: str) -> List[VocabEntry]:
    """
    Parse the model's vocabulary answer

    Entries without hebrew, translation or wordType are dropped.

    Raises:
        ModelResponseError: the answer is not a JSON object
    """
    try:
        parsed = json.loads(extract_json_object(content))
    except json.JSONDecodeError as e:
        raise ModelResponseError(f"Invalid JSON from model: {e}") from e

    if not isinstance(parsed, dict):
        raise ModelResponseError("Model response is not a JSON object")

    words = parsed.get('vocabularyWords')
    if not isinstance(words, list):
        return []

    entries = []
    for word in words:
        if not isinstance(word, dict):
            continue
        if not (word.get('hebrew') and word.get('translation') and word.get('wordType')):
            continue
        entries.append(VocabEntry(
            hebrew=word['hebrew'],
            translation=word['translation'],
            word_type=word['wordType'],
            infinitive=word.get('infinitive') or None,
            phonetic=word.get('phonetic') or None,
        ))
    return entries
