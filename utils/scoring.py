"""Scoring and aggregation utilities for the website audit."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from enum import Enum


class AgentName(Enum):
    """The fixed analysis panel, in report order."""
    BUSINESS = "business"
    STYLE = "style"
    HERO = "hero"
    PROBLEM = "problem"
    SEO = "seo"
    CONVERSION = "conversion"


class ScoreBand(Enum):
    """Display band for a 0-100 score."""
    EXCELLENT = "excellent"  # 80+
    GOOD = "good"            # 60-79
    WARNING = "warning"      # 40-59
    CRITICAL = "critical"    # < 40


def score_band(score: int) -> ScoreBand:
    if score >= 80:
        return ScoreBand.EXCELLENT
    if score >= 60:
        return ScoreBand.GOOD
    if score >= 40:
        return ScoreBand.WARNING
    return ScoreBand.CRITICAL


def round_half_up(value: float) -> int:
    """Round .5 upwards, matching how the scores are displayed client side."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


@dataclass
class AgentResult:
    """Fixed-shape result every agent produces, genuine or fallback."""
    score: int
    insights: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Optional["AgentResult"]:
        """
        Build a result from decoded JSON, or return None if the shape is wrong.

        ``score`` must be numeric; ``insights`` and ``recommendations`` must
        be lists of strings. Scores are rounded and clamped to 0-100.
        """
        if not isinstance(data, dict):
            return None
        score = data.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            return None
        if isinstance(score, float) and not math.isfinite(score):
            return None
        insights = data.get("insights")
        recommendations = data.get("recommendations")
        if not _is_string_list(insights) or not _is_string_list(recommendations):
            return None
        return cls(
            score=clamp_score(score),
            insights=list(insights),
            recommendations=list(recommendations),
        )

    def copy(self) -> "AgentResult":
        return AgentResult(self.score, list(self.insights), list(self.recommendations))

    @property
    def band(self) -> ScoreBand:
        return score_band(self.score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "insights": list(self.insights),
            "recommendations": list(self.recommendations),
        }


# Order matters: hero and conversion fixes first, then one SEO fix.
TOP_RECOMMENDATION_POLICY: Tuple[Tuple[AgentName, int], ...] = (
    (AgentName.HERO, 2),
    (AgentName.CONVERSION, 2),
    (AgentName.SEO, 1),
)
MAX_TOP_RECOMMENDATIONS = 5

GENERIC_RECOMMENDATIONS = [
    "Clarify your value proposition in the hero section",
    "Add social proof such as testimonials and client logos near calls to action",
    "Write a unique title tag and meta description for every key page",
]


def build_top_recommendations(results: Mapping[str, AgentResult]) -> List[str]:
    """Pick the headline recommendations for the report (1 to 5 entries)."""
    picked: List[str] = []
    for agent_name, count in TOP_RECOMMENDATION_POLICY:
        result = results.get(agent_name.value)
        if result is None:
            continue
        picked.extend(rec.strip() for rec in result.recommendations[:count] if rec and rec.strip())

    picked = picked[:MAX_TOP_RECOMMENDATIONS]
    if not picked:
        return list(GENERIC_RECOMMENDATIONS)
    return picked


def mean_score(scores: Sequence[int]) -> int:
    if not scores:
        return 0
    return clamp_score(sum(scores) / len(scores))


def weighted_score(
    results: Mapping[str, AgentResult],
    weights: Mapping[str, float],
    genuine: Mapping[str, bool],
) -> int:
    """
    Weighted mean over genuine results only.

    The denominator is the weight actually realized. When nothing genuine
    came back, the plain mean of every result is used instead.
    """
    total_score = 0.0
    total_weight = 0.0
    for name, result in results.items():
        if not genuine.get(name):
            continue
        weight = weights.get(name, 0.0)
        total_score += result.score * weight
        total_weight += weight

    if total_weight <= 0:
        return mean_score([r.score for r in results.values()])
    return clamp_score(total_score / total_weight)


def compute_overall_score(
    results: Mapping[str, AgentResult],
    weights: Mapping[str, float],
    genuine: Mapping[str, bool],
    mode: str = "mean",
) -> int:
    if mode == "weighted":
        return weighted_score(results, weights, genuine)
    return mean_score([r.score for r in results.values()])


@dataclass
class AuditReport:
    """Complete audit report with all agent results."""
    website_url: str
    overall_score: int
    agents: Dict[str, AgentResult]
    top_recommendations: List[str]
    extracted_page: Any  # ExtractedPage
    timestamp: str
    social_url: Optional[str] = None

    @property
    def band(self) -> ScoreBand:
        return score_band(self.overall_score)

    def get_agent(self, name: str) -> Optional[AgentResult]:
        return self.agents.get(name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "website_url": self.website_url,
            "social_url": self.social_url,
            "overall_score": self.overall_score,
            "agents": {name: result.to_dict() for name, result in self.agents.items()},
            "top_recommendations": list(self.top_recommendations),
            "extracted_page": self.extracted_page.to_dict() if self.extracted_page else {},
            "timestamp": self.timestamp,
        }
