"""
Chat-completion client for OpenRouter, used to define unknown words
"""
import os
from typing import Dict, List, Optional

import requests
from rich.console import Console

from hebvocab.errors import LLMError
from hebvocab.vocab_matcher import (
    MatchResult,
    VocabEntry,
    limit_unknown_tokens,
    merge_vocabulary,
)
from hebvocab.vocab_prompt import SYSTEM_PROMPT, build_vocab_prompt, parse_vocab_response

console = Console()


class LLMClient:
    """Minimal OpenAI-compatible chat client"""

    def __init__(self, api_key: str, base_url: str = "https://openrouter.ai/api/v1",
                 model: str = "perplexity/sonar", timeout: int = 60,
                 temperature: float = 0.2, max_tokens: int = 1500):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _post(self, messages: List[Dict[str, str]]) -> requests.Response:
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            return requests.post(f"{self.base_url}/chat/completions",
                                 json=payload, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise LLMError(f"Failed to reach language model: {e}") from e

    def complete(self, prompt: str, system: str = SYSTEM_PROMPT) -> str:
        """
        Send a prompt and return the answer text

        Some models reject system messages with HTTP 400; the request is then
        retried once with the system text folded into the user message.

        Raises:
            LLMError: HTTP failure or empty answer
        """
        response = self._post([
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ])
        if response.status_code == 400:
            response = self._post([{"role": "user", "content": f"{system}\n\n{prompt}"}])

        if response.status_code in (401, 403):
            raise LLMError("Invalid API key. Please check your OpenRouter API key.", response.status_code)
        if response.status_code == 429:
            raise LLMError("Rate limit exceeded. Please try again later.", response.status_code)
        if response.status_code >= 400:
            raise LLMError(f"Language model error: HTTP {response.status_code}", response.status_code)

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMError(f"Unexpected response from language model: {e}") from e

        if not content:
            raise LLMError("No response from AI model")
        return content


def create_llm_client(config: dict) -> LLMClient:
    """Create LLMClient from configuration and OPENROUTER_API_KEY"""
    api_key = os.getenv("OPENROUTER_API_KEY")
    if not api_key:
        raise LLMError("OPENROUTER_API_KEY environment variable is not configured")

    llm = config['llm']
    return LLMClient(
        api_key=api_key,
        base_url=llm['base_url'],
        model=llm['model'],
        timeout=llm.get('timeout', 60),
        temperature=llm.get('temperature', 0.2),
        max_tokens=llm.get('max_tokens', 1500),
    )


def define_unknown_words(result: MatchResult, client: Optional[LLMClient],
                         limit: int = 30) -> List[VocabEntry]:
    """
    Complete the known vocabulary of a match with model definitions

    Args:
        result: Output of match_text
        client: Model client (None skips the model call)
        limit: Maximum unknown tokens sent to the model

    Returns:
        Known vocabulary followed by generated entries, one per token
    """
    tokens = limit_unknown_tokens(result.unknown_tokens, limit)
    if not tokens or client is None:
        return list(result.known_vocab)

    content = client.complete(build_vocab_prompt(tokens))
    generated = parse_vocab_response(content)
    console.print(f"[dim]Model defined {len(generated)}/{len(tokens)} unknown tokens[/dim]")

    return merge_vocabulary(result.known_vocab, generated)
