"""Conversion Barrier Analysis Agent."""

from .base_agent import BaseAgent
from orchestrator.context_store import ExtractedPage
from utils.scoring import AgentName


class ConversionAgent(BaseAgent):
    """
    Identifies conversion barriers on the page.

    Evaluates:
    - Trust signals and social proof
    - CTA placement and copy
    - Form friction
    - Navigation and path clarity
    """

    agent_name = AgentName.CONVERSION
    agent_description = "Identifies conversion barriers"
    weight = 0.15
    input_budget = 1500

    system_prompt = """
You are a conversion rate optimization expert. Identify conversion barriers:
1. Trust signals and social proof
2. CTA placement and design
3. Form friction and user experience
4. Navigation issues
Score conversion readiness from 0 to 100.
"""

    def build_input(self, page: ExtractedPage) -> str:
        return "\n".join([
            self.field("Website URL", page.url, 300),
            self.field("Hero Section", page.hero_section, 600),
            self.field("Body Content", page.text_content, self.input_budget),
        ])
