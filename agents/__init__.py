"""Agent package for the website audit panel."""

from .base_agent import BaseAgent
from .runner import AgentRunner, AgentOutcome, ValidResponse, MalformedResponse, parse_agent_response
from .fallbacks import FALLBACKS, GENERIC_FALLBACK, category_fallback, category_for_prompt
from .business_agent import BusinessAgent
from .style_agent import StyleAgent
from .hero_agent import HeroAgent
from .problem_agent import ProblemAgent
from .seo_agent import SEOAgent
from .conversion_agent import ConversionAgent

# Fixed panel, in report order
PANEL = (
    BusinessAgent,
    StyleAgent,
    HeroAgent,
    ProblemAgent,
    SEOAgent,
    ConversionAgent,
)

__all__ = [
    'BaseAgent',
    'AgentRunner',
    'AgentOutcome',
    'ValidResponse',
    'MalformedResponse',
    'parse_agent_response',
    'FALLBACKS',
    'GENERIC_FALLBACK',
    'category_fallback',
    'category_for_prompt',
    'BusinessAgent',
    'StyleAgent',
    'HeroAgent',
    'ProblemAgent',
    'SEOAgent',
    'ConversionAgent',
    'PANEL',
]
