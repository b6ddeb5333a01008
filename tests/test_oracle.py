from typing import Any

import pytest
import requests

from docscan.analysis.errors import OracleResponseError
from docscan.analysis.oracle import ChatCompletionsOracle
from docscan.analysis.prompts import GRAMMAR_INSTRUCTION
from docscan.config import OracleConfig
from docscan.domain.enums import CheckKind


class _Response:
    def __init__(self, status: int, body: Any) -> None:
        self.status_code = status
        self._body = body

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> Any:
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class _Session:
    def __init__(self, response: _Response) -> None:
        self.response = response
        self.requests: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> _Response:
        self.requests.append({"url": url, **kwargs})
        return self.response


CFG = OracleConfig(base_url="http://oracle.local/v1/", api_key="k", model="test-model", timeout=5)


def test_sends_instruction_and_chunk() -> None:
    session = _Session(_Response(200, {"choices": [{"message": {"content": '{"mistakes": []}'}}]}))

    reply = ChatCompletionsOracle(CFG, session=session).analyze(CheckKind.grammar, "Helo wrld.")

    assert reply == '{"mistakes": []}'
    (sent,) = session.requests
    assert sent["url"] == "http://oracle.local/v1/chat/completions"
    assert sent["timeout"] == 5
    assert sent["headers"]["Authorization"] == "Bearer k"
    assert sent["json"]["model"] == "test-model"
    assert sent["json"]["messages"] == [
        {"role": "system", "content": GRAMMAR_INSTRUCTION},
        {"role": "user", "content": "Helo wrld."},
    ]


def test_non_2xx_raises() -> None:
    oracle = ChatCompletionsOracle(CFG, session=_Session(_Response(503, {})))

    with pytest.raises(requests.HTTPError):
        oracle.analyze(CheckKind.plagiarism, "text")


@pytest.mark.parametrize("body", [{"choices": []}, {"error": "x"}, ValueError("not json")])
def test_unexpected_completion_shape(body: Any) -> None:
    oracle = ChatCompletionsOracle(CFG, session=_Session(_Response(200, body)))

    with pytest.raises(OracleResponseError):
        oracle.analyze(CheckKind.ai_detection, "text")


def test_null_content_is_empty_reply() -> None:
    session = _Session(_Response(200, {"choices": [{"message": {"content": None}}]}))

    assert ChatCompletionsOracle(CFG, session=session).analyze(CheckKind.grammar, "text") == ""
