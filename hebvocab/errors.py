"""
Exceptions raised by the collaborators around the matcher
(config loading, word store, news feed, language model)
"""
from typing import Optional


class HebVocabError(Exception):
    """Base class for all hebvocab errors"""


class ConfigError(HebVocabError):
    pass


class DuplicateWordError(HebVocabError):
    """Word with the same normalized Hebrew already stored"""

    def __init__(self, hebrew: str, existing_id: str):
        super().__init__(f"Word already exists: {hebrew} (id {existing_id})")
        self.hebrew = hebrew
        self.existing_id = existing_id


class WordNotFoundError(HebVocabError):
    pass


class FeedError(HebVocabError):
    pass


class LLMError(HebVocabError):
    """Language model call failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ModelResponseError(HebVocabError):
    """Model answered with something that isn't the JSON we asked for"""
