"""LangGraph workflow — gather → score → categorize → filter."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypedDict

from langgraph.graph import END, StateGraph

from jobmatch.agents.categorizer import categorize
from jobmatch.agents.coordinator import FallbackCoordinator
from jobmatch.agents.filters import apply_filters
from jobmatch.agents.scoring import ScoringEngine
from jobmatch.models.job import JobRecord, JobSource
from jobmatch.models.profile import CandidateProfile, FilterSpec, load_filters, load_profile
from jobmatch.models.results import (
    Category,
    GatherStatus,
    ProviderStatus,
    RecommendationResult,
)
from jobmatch.models.scoring import ScoredJob, ScoringWeights
from jobmatch.storage.store import JobRecordStore
from jobmatch.tools.sources import DEFAULT_TIMEOUT, RemoteListingProvider

logger = logging.getLogger(__name__)


# =============================================================================
# Pipeline State
# =============================================================================


class RecommendState(TypedDict, total=False):
    """State passed between nodes; lives for exactly one request."""

    # Input
    profile: CandidateProfile
    filters: FilterSpec

    # Data
    candidates: list[JobRecord]
    scored: list[ScoredJob]
    categorized: dict[Category, list[ScoredJob]]
    categories: dict[Category, list[ScoredJob]]

    # Status
    status: GatherStatus
    sources: list[JobSource]
    provider_status: ProviderStatus


# =============================================================================
# Build the Graph
# =============================================================================


def build_pipeline(
    coordinator: FallbackCoordinator,
    engine: ScoringEngine | None = None,
):
    """Build and compile the recommendation graph around shared, read-only collaborators."""
    engine = engine or ScoringEngine()

    def gather_node(state: RecommendState) -> dict:
        logger.info("=== Gathering candidates ===")
        result = coordinator.gather_candidates(state["profile"], state["filters"])
        return {
            "candidates": result.records,
            "status": result.status,
            "sources": result.sources,
            "provider_status": result.provider_status,
        }

    def score_node(state: RecommendState) -> dict:
        logger.info("=== Scoring %d candidates ===", len(state.get("candidates", [])))
        scored = engine.score_all(state["profile"], state.get("candidates", []))
        return {"scored": scored}

    def categorize_node(state: RecommendState) -> dict:
        logger.info("=== Categorizing ===")
        return {"categorized": categorize(state.get("scored", []))}

    def filter_node(state: RecommendState) -> dict:
        logger.info("=== Applying filters ===")
        return {"categories": apply_filters(state.get("categorized", {}), state["filters"])}

    def route_after_gather(state: RecommendState) -> str:
        if state.get("status") == GatherStatus.NO_CANDIDATES:
            return "empty"
        return "score"

    graph = StateGraph(RecommendState)

    graph.add_node("gather_candidates", gather_node)
    graph.add_node("score_jobs", score_node)
    graph.add_node("categorize_jobs", categorize_node)
    graph.add_node("filter_jobs", filter_node)

    graph.set_entry_point("gather_candidates")
    graph.add_conditional_edges(
        "gather_candidates",
        route_after_gather,
        {"score": "score_jobs", "empty": END},
    )
    graph.add_edge("score_jobs", "categorize_jobs")
    graph.add_edge("categorize_jobs", "filter_jobs")
    graph.add_edge("filter_jobs", END)

    return graph.compile()


# =============================================================================
# Caller-facing entry point
# =============================================================================


def recommend(
    profile: CandidateProfile | Mapping[str, Any],
    filters: FilterSpec | Mapping[str, Any] | None = None,
    *,
    store: JobRecordStore,
    provider: RemoteListingProvider | None = None,
    weights: ScoringWeights | None = None,
    timeout_secs: float = DEFAULT_TIMEOUT,
    keywords: tuple[str, ...] = (),
) -> RecommendationResult:
    """Produce categorized, filtered, explained recommendations for one profile.

    Raises:
        InvalidProfile: if the profile or filters fail validation. Raised
            before any source is contacted.
    """
    candidate = load_profile(profile)
    spec = load_filters(filters)

    coordinator = FallbackCoordinator(store, provider, timeout_secs=timeout_secs, keywords=keywords)
    pipeline = build_pipeline(coordinator, ScoringEngine(weights))

    final = pipeline.invoke({"profile": candidate, "filters": spec})

    categories = final.get("categories") or {category: [] for category in Category}
    result = RecommendationResult(
        status=final["status"],
        sources=final.get("sources", []),
        provider_status=final.get("provider_status", ProviderStatus.DISABLED),
        total_candidates=len(final.get("candidates", [])),
        categories=categories,
    )
    logger.info(
        "Recommendation complete: status=%s, candidates=%d, %s",
        result.status.value,
        result.total_candidates,
        ", ".join(f"{c.value}={len(v)}" for c, v in result.categories.items()),
    )
    return result
