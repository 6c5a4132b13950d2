"""Canned per-category results used when genuine analysis is unavailable."""

from typing import Dict, Optional

from utils.scoring import AgentName, AgentResult

FALLBACKS: Dict[AgentName, AgentResult] = {
    AgentName.BUSINESS: AgentResult(
        score=70,
        insights=[
            "Business positioning is present but could be stated more directly",
            "Target audience is implied rather than named explicitly",
            "Few authority signals such as credentials, press or client logos are visible",
        ],
        recommendations=[
            "State who you serve and the outcome you deliver in one sentence above the fold",
            "Add credibility markers such as client logos, certifications or media mentions",
            "Align the tone of your copy with the expectations of your core audience",
        ],
    ),
    AgentName.STYLE: AgentResult(
        score=72,
        insights=[
            "Visual presentation appears broadly consistent across the page",
            "Brand voice varies between headline and body copy",
            "Differentiation from competitors is not obvious at first glance",
        ],
        recommendations=[
            "Document a short style guide covering colors, typography and voice",
            "Use one consistent tone across headlines, body copy and calls to action",
            "Highlight one distinctive brand element that competitors do not use",
        ],
    ),
    AgentName.HERO: AgentResult(
        score=68,
        insights=[
            "Hero headline does not immediately communicate the core value",
            "Primary call to action competes with other elements for attention",
            "The five-second first impression could be sharper",
        ],
        recommendations=[
            "Rewrite the hero headline to state the main benefit in under ten words",
            "Make one primary call to action visually dominant in the hero section",
            "Add a supporting subheadline that explains who the offer is for",
        ],
    ),
    AgentName.PROBLEM: AgentResult(
        score=66,
        insights=[
            "Customer pain points are mentioned only briefly",
            "The link between the problem and your solution is not spelled out",
            "Some copy relies on jargon rather than customer language",
        ],
        recommendations=[
            "Describe the top three customer problems in the words customers use",
            "Show explicitly how each feature solves a named problem",
            "Replace internal jargon with plain, benefit-focused language",
        ],
    ),
    AgentName.SEO: AgentResult(
        score=74,
        insights=[
            "Basic on-page elements such as title and headings are in place",
            "Meta description may not be optimized for click-through",
            "Keyword focus of the page is unclear",
        ],
        recommendations=[
            "Write a unique meta description of 140-160 characters with a clear benefit",
            "Include the primary keyword in the title tag and the H1",
            "Structure content with descriptive H2 subheadings",
        ],
    ),
    AgentName.CONVERSION: AgentResult(
        score=65,
        insights=[
            "Trust signals near calls to action are limited",
            "Calls to action use generic wording",
            "The path from landing to conversion has avoidable friction",
        ],
        recommendations=[
            "Place testimonials or reviews next to the primary call to action",
            "Replace generic button text with value-driven copy",
            "Reduce form fields to the essentials for the first contact",
        ],
    ),
}

GENERIC_FALLBACK = AgentResult(
    score=60,
    insights=[
        "Automated analysis was not available for this area",
        "The page content was reviewed with general best practices only",
        "A manual review is recommended for specific findings",
    ],
    recommendations=[
        "Review this area manually against current best practices",
        "Gather visitor feedback to identify the most pressing issues",
        "Re-run the audit once the page content is accessible",
    ],
)


def category_for_prompt(prompt: str) -> Optional[AgentName]:
    """
    Recognise the panel category from keywords in a prompt.

    Keywords are tried in panel order, so the earliest category wins when a
    prompt mentions several (a prompt naming both "conversion" and "hero"
    maps to hero).
    """
    text = (prompt or "").lower()
    for name in AgentName:
        if name.value in text:
            return name
    return None


def category_fallback(name: Optional[AgentName]) -> AgentResult:
    """Fresh copy of the canned result for ``name`` (generic if unknown)."""
    return FALLBACKS.get(name, GENERIC_FALLBACK).copy()
