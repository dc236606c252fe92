"""Chat-completions ranking client."""

from __future__ import annotations

import json
import logging
from collections.abc import Container
from typing import Protocol

import httpx

from codemap.index.models import EntryPoint
from codemap.ranking.models import RankingResult
from codemap.ranking.prompt import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

OPENAI_CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_TIMEOUT_SECONDS = 60.0
MIN_RANK = 1
MAX_RANK = 10


class RankerDeclinedError(Exception):
    """Raised when the ranker cannot produce a usable response."""


class Ranker(Protocol):
    """Callable ranking backend."""

    def rank(self, prompt: str, model: str, api_key: str) -> RankingResult:
        """Return ranked entry points and a brief, or raise RankerDeclinedError."""


class OpenAIRanker:
    """Single POST to a chat-completions endpoint requesting a JSON object reply."""

    name = "openai"

    def __init__(
        self,
        client: httpx.Client | None = None,
        endpoint: str = OPENAI_CHAT_COMPLETIONS_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._client = client
        self._endpoint = endpoint
        self._timeout = timeout

    def rank(self, prompt: str, model: str, api_key: str) -> RankingResult:
        """Send the prompt and parse the structured reply."""
        if not api_key:
            raise RankerDeclinedError("missing API key")
        if not api_key.isascii():
            raise RankerDeclinedError("API key contains non-ASCII characters")
        body = build_request_body(prompt, model)
        headers = {"Authorization": f"Bearer {api_key}"}
        try:
            if self._client is not None:
                response = self._client.post(self._endpoint, json=body, headers=headers)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.post(self._endpoint, json=body, headers=headers)
        except httpx.HTTPError as exc:
            raise RankerDeclinedError(f"transport error: {exc}") from exc
        except UnicodeEncodeError as exc:
            raise RankerDeclinedError(f"request could not be encoded: {exc}") from exc

        if not response.is_success:
            raise RankerDeclinedError(f"HTTP {response.status_code}: {response.text[:200]}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise RankerDeclinedError("response body is not JSON") from exc
        return parse_ranking_content(extract_message_content(payload))


def build_request_body(prompt: str, model: str) -> dict[str, object]:
    """Return the chat-completions request body."""
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        "response_format": {"type": "json_object"},
    }


def extract_message_content(payload: object) -> str:
    """Return ``choices[0].message.content`` or decline."""
    if not isinstance(payload, dict):
        raise RankerDeclinedError("response payload is not an object")
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        raise RankerDeclinedError("response has no choices")
    message = choices[0].get("message")
    if not isinstance(message, dict):
        raise RankerDeclinedError("response choice has no message")
    content = message.get("content")
    if not isinstance(content, str):
        raise RankerDeclinedError("missing content in response message")
    return content


def parse_ranking_content(content: str) -> RankingResult:
    """Parse ``{entries:[{path,rank,reason}], project_brief}``; any deviation declines."""
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as exc:
        raise RankerDeclinedError(f"content is not JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise RankerDeclinedError("content is not a JSON object")
    entries = parsed.get("entries")
    brief = parsed.get("project_brief")
    if not isinstance(entries, list):
        raise RankerDeclinedError("content.entries must be a list")
    if not isinstance(brief, str):
        raise RankerDeclinedError("content.project_brief must be a string")

    entry_points: list[EntryPoint] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise RankerDeclinedError(f"entries[{index}] is not an object")
        path = entry.get("path")
        rank = entry.get("rank")
        reason = entry.get("reason")
        if not isinstance(path, str) or not path:
            raise RankerDeclinedError(f"entries[{index}].path must be a non-empty string")
        if isinstance(rank, bool) or not isinstance(rank, int) or not MIN_RANK <= rank <= MAX_RANK:
            raise RankerDeclinedError(f"entries[{index}].rank must be an integer in 1..10")
        if not isinstance(reason, str):
            raise RankerDeclinedError(f"entries[{index}].reason must be a string")
        entry_points.append(EntryPoint(path=path, rank=rank, reason=reason))
    return RankingResult(entry_points=tuple(entry_points), project_brief=brief)


def retain_known_paths(
    entry_points: tuple[EntryPoint, ...],
    known_paths: Container[str],
) -> tuple[EntryPoint, ...]:
    """Drop entries for unindexed paths and repeated paths, keeping first occurrences."""
    kept: list[EntryPoint] = []
    seen: set[str] = set()
    for entry_point in entry_points:
        if entry_point.path not in known_paths:
            logger.debug("ranker: dropping unindexed path %s", entry_point.path)
            continue
        if entry_point.path in seen:
            logger.debug("ranker: dropping repeated path %s", entry_point.path)
            continue
        seen.add(entry_point.path)
        kept.append(entry_point)
    return tuple(kept)
