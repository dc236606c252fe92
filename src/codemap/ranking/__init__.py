"""Entry-point ranking: candidates, prompt, external client and heuristics."""

from .candidates import gather_candidates, is_readme, truncate_utf8
from .client import (
    OPENAI_CHAT_COMPLETIONS_URL,
    OpenAIRanker,
    Ranker,
    RankerDeclinedError,
    build_request_body,
    extract_message_content,
    parse_ranking_content,
    retain_known_paths,
)
from .engine import MAX_BYTES_PER_FILE, RANKER_MAX_FILES, refresh_entry_points
from .heuristics import FALLBACK_BRIEF, apply_heuristic_fallback, heuristic_reason
from .models import Candidate, RankerOutcome, RankingResult
from .prompt import PROMPT_PREAMBLE, SYSTEM_PROMPT, render_prompt

__all__ = [
    "Candidate",
    "FALLBACK_BRIEF",
    "MAX_BYTES_PER_FILE",
    "OPENAI_CHAT_COMPLETIONS_URL",
    "OpenAIRanker",
    "PROMPT_PREAMBLE",
    "RANKER_MAX_FILES",
    "Ranker",
    "RankerDeclinedError",
    "RankerOutcome",
    "RankingResult",
    "SYSTEM_PROMPT",
    "apply_heuristic_fallback",
    "build_request_body",
    "extract_message_content",
    "gather_candidates",
    "heuristic_reason",
    "is_readme",
    "parse_ranking_content",
    "refresh_entry_points",
    "render_prompt",
    "retain_known_paths",
    "truncate_utf8",
]
