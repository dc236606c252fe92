"""Onboarding prompt assembly under a character budget."""

from __future__ import annotations

from collections.abc import Sequence

from codemap.ranking.models import Candidate

SYSTEM_PROMPT = "You help developers quickly onboard to codebases."

PROMPT_PREAMBLE = (
    "You are onboarding a developer to this repository.\n"
    "Return STRICT JSON with <=7 UNIQUE entries by path.\n"
    'Format: {"entries":[{"path":"...","rank":1-10,"reason":"..."}],"project_brief":"..."}\n'
    "\n"
    "Rules:\n"
    "- Do not repeat a path.\n"
    "- Use higher rank for more important files.\n"
    "- Keep the brief to 3-5 sentences.\n"
    "\n"
)


def render_prompt(candidates: Sequence[Candidate], max_chars: int) -> str:
    """Append ``path\\n---\\nsnippet`` blocks until the prompt reaches ``max_chars``.

    The last snippet that fits is cut to the remaining budget; block headers
    and separators are always written whole.
    """
    parts = [PROMPT_PREAMBLE]
    length = len(PROMPT_PREAMBLE)
    for candidate in candidates:
        if length >= max_chars:
            break
        header = f"{candidate.path}\n---\n"
        length += len(header)
        snippet = candidate.snippet[: max(0, max_chars - length)]
        parts.extend((header, snippet, "\n\n"))
        length += len(snippet) + 2
    return "".join(parts)
