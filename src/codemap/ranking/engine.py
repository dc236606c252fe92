"""Entry-point refresh: optional external ranker, then heuristic fallback."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from pathlib import Path

from codemap.config import CodemapConfig
from codemap.index.models import ProjectContext
from codemap.ranking.candidates import gather_candidates
from codemap.ranking.client import OpenAIRanker, Ranker, RankerDeclinedError, retain_known_paths
from codemap.ranking.heuristics import apply_heuristic_fallback
from codemap.ranking.models import Candidate, RankerOutcome
from codemap.ranking.prompt import render_prompt

logger = logging.getLogger(__name__)

RANKER_MAX_FILES = 15
MAX_BYTES_PER_FILE = 40_000
SUPPORTED_PROVIDERS = ("openai",)


def refresh_entry_points(
    context: ProjectContext,
    repo_root: Path,
    config: CodemapConfig,
    ranker: Ranker | None = None,
) -> tuple[ProjectContext, RankerOutcome]:
    """Replace entry points and brief from the ranker when it succeeds.

    A declined or skipped ranker leaves the carried-forward values alone;
    the heuristic fallback then fills entry points only when none remain.
    """
    outcome = RankerOutcome()
    candidates = gather_candidates(
        context,
        repo_root,
        max_files=RANKER_MAX_FILES,
        max_bytes_per_file=MAX_BYTES_PER_FILE,
    )
    logger.info("ranker: %d candidate files", len(candidates))
    for candidate in candidates[:10]:
        logger.info("  - %s", candidate.path)
    if candidates:
        context, outcome = _call_ranker(context, candidates, config, ranker)
    if not context.entry_points:
        context = apply_heuristic_fallback(context, repo_root, MAX_BYTES_PER_FILE)
    return context, outcome


def _call_ranker(
    context: ProjectContext,
    candidates: list[Candidate],
    config: CodemapConfig,
    ranker: Ranker | None,
) -> tuple[ProjectContext, RankerOutcome]:
    if config.llm_provider not in SUPPORTED_PROVIDERS:
        logger.info("ranker: provider %r is not supported, skipping.", config.llm_provider)
        return context, RankerOutcome()
    if config.llm_api_key is None:
        logger.info("ranker: no API key, skipping.")
        return context, RankerOutcome()

    backend = ranker if ranker is not None else OpenAIRanker()
    prompt = render_prompt(candidates, config.max_prompt_chars)
    logger.info("ranker: calling model=%s", config.llm_model)
    started = time.perf_counter()
    try:
        result = backend.rank(prompt=prompt, model=config.llm_model, api_key=config.llm_api_key)
    except RankerDeclinedError as exc:
        logger.warning("ranker: declined -> %s", exc)
        return context, RankerOutcome(called=True, ok=False, duration_ms=_elapsed_ms(started))

    entry_points = retain_known_paths(result.entry_points, context.files)
    logger.info("ranker: success (%d entries)", len(entry_points))
    ranked = replace(context, entry_points=entry_points, project_brief=result.project_brief)
    return ranked, RankerOutcome(called=True, ok=True, duration_ms=_elapsed_ms(started))


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
