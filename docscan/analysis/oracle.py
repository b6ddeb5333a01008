"""Text-analysis oracle.

The analysis pipeline only depends on the ``Oracle`` protocol: given a check kind and
a chunk of text, return the raw reply. ``ChatCompletionsOracle`` talks to any
OpenAI-compatible ``/chat/completions`` endpoint.
"""

import logging
from typing import Protocol

import requests

from docscan.analysis.errors import OracleResponseError
from docscan.analysis.prompts import INSTRUCTIONS, MAX_COMPLETION_TOKENS
from docscan.config import OracleConfig
from docscan.domain.enums import CheckKind

logger = logging.getLogger(__name__)


class Oracle(Protocol):
    def analyze(self, kind: CheckKind, chunk_text: str) -> str: ...


class ChatCompletionsOracle:
    def __init__(self, cfg: OracleConfig, session: requests.Session | None = None) -> None:
        self._cfg = cfg
        self._session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self._cfg.base_url.rstrip('/')}/chat/completions"

    def analyze(self, kind: CheckKind, chunk_text: str) -> str:
        payload = {
            "model": self._cfg.model,
            "messages": [
                {"role": "system", "content": INSTRUCTIONS[kind]},
                {"role": "user", "content": chunk_text},
            ],
            "max_completion_tokens": MAX_COMPLETION_TOKENS[kind],
        }
        headers = {"Content-Type": "application/json"}
        if self._cfg.api_key:
            headers["Authorization"] = f"Bearer {self._cfg.api_key}"

        r = self._session.post(self.endpoint, json=payload, headers=headers, timeout=self._cfg.timeout)
        r.raise_for_status()

        try:
            data = r.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise OracleResponseError(f"unexpected_completion_shape:{type(e).__name__}") from e

        logger.debug("oracle %s reply: %d chars for %d-char chunk", kind.value, len(content or ""), len(chunk_text))
        return content or ""
