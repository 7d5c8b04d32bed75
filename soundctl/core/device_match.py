"""Name-to-device matching logic."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from soundctl.core.errors import AmbiguousMatchError, DeviceNotFoundError
from soundctl.core.model import Device, MatchCandidate
from soundctl.core.text import normalize, tokenize

EXACT_WEIGHT = 0.7
SUBSTRING_WEIGHT = 0.3
AMBIGUITY_BAND = 0.05
MIN_SCORE = 0.5
LOGGER = logging.getLogger(__name__)


def _substring_hits(query_tokens: set[str], candidate_tokens: set[str]) -> int:
    return sum(
        1
        for token in query_tokens
        if any(token in other or other in token for other in candidate_tokens)
    )


def _abbreviation_hits(query_tokens: set[str], candidate_tokens: set[str]) -> int:
    return sum(1 for token in query_tokens if any(token in other for other in candidate_tokens))


def match_score(query: str, candidate_name: str) -> float:
    """Score how well a free-text query describes a device name, in [0, 1].

    Whole-token overlap carries most of the weight; tokens that only overlap
    as substrings earn the remainder. The score is never below the whole-token
    weight times the share of query tokens found inside candidate tokens
    ("airpod" in "airpods"), so an abbreviated query still clears the
    acceptance threshold.

    Scores rank candidates for one query and are not comparable across
    queries. Adding a whole word to a query that already holds an abbreviated
    one need not raise its score: "airpod" and "airpod max" both score 0.7
    against "AirPods Max".
    """
    query_tokens = tokenize(query)
    candidate_tokens = tokenize(candidate_name)
    if not query_tokens or not candidate_tokens:
        return 0.0

    exact_overlap = len(query_tokens & candidate_tokens) / len(query_tokens)
    substring_score = _substring_hits(query_tokens, candidate_tokens) / len(query_tokens)
    abbreviation_score = _abbreviation_hits(query_tokens, candidate_tokens) / len(query_tokens)
    score = EXACT_WEIGHT * exact_overlap + SUBSTRING_WEIGHT * substring_score
    return max(score, EXACT_WEIGHT * abbreviation_score)


def score_devices(query: str, devices: Iterable[Device]) -> list[MatchCandidate]:
    candidates = [MatchCandidate(device=device, score=match_score(query, device.name)) for device in devices]
    return [candidate for candidate in candidates if candidate.score > 0.0]


def find_by_name(name: str, devices: Sequence[Device]) -> Device | None:
    normalized = normalize(name)
    for device in devices:
        if normalize(device.name) == normalized:
            return device
    return None


def resolve_fuzzy(query: str, devices: Sequence[Device]) -> Device:
    """Pick the single device whose name best matches ``query``.

    Near-ties within the ambiguity band fail before the minimum score is
    checked, so two weak but equal candidates report ambiguity rather than
    not-found.
    """
    candidates = score_devices(query, devices)
    if not candidates:
        raise DeviceNotFoundError(query)

    top = max(candidate.score for candidate in candidates)
    contenders = [candidate for candidate in candidates if abs(candidate.score - top) < AMBIGUITY_BAND]
    LOGGER.debug(
        "Fuzzy scores for %r: %s",
        query,
        ", ".join(f"{c.device.name}={c.score:.2f}" for c in candidates),
    )

    if len(contenders) > 1:
        raise AmbiguousMatchError(query, [candidate.device.name for candidate in contenders])
    if top < MIN_SCORE:
        raise DeviceNotFoundError(query)
    return contenders[0].device
