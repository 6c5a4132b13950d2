"""Hero Section Analysis Agent."""

from .base_agent import BaseAgent
from orchestrator.context_store import ExtractedPage
from utils.scoring import AgentName


class HeroAgent(BaseAgent):
    """
    Analyzes the above-the-fold hero section.

    Only sees the hero text, page title and H1: the point is what a
    visitor understands in the first five seconds.
    """

    agent_name = AgentName.HERO
    agent_description = "Analyzes hero section clarity and CTA"
    weight = 0.20
    input_budget = 600

    system_prompt = """
You are a landing page conversion expert. Analyze the hero section for:
1. Headline clarity and impact (5-second rule)
2. Value proposition strength
3. CTA effectiveness
4. First impression quality
Score the hero section from 0 to 100.
"""

    def build_input(self, page: ExtractedPage) -> str:
        return "\n".join([
            self.field("Title", page.title, 200),
            self.field("H1", page.h1, 200),
            self.field("Hero Section", page.hero_section, self.input_budget),
        ])
