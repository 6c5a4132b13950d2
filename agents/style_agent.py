"""Brand Style Analysis Agent."""

from .base_agent import BaseAgent
from orchestrator.context_store import ExtractedPage
from utils.scoring import AgentName


class StyleAgent(BaseAgent):
    """Checks brand consistency and style alignment with the audience."""

    agent_name = AgentName.STYLE
    agent_description = "Analyzes brand style and consistency"
    weight = 0.15
    input_budget = 1000

    system_prompt = """
You are a brand style expert. Analyze the website content and brand alignment:
1. Visual consistency and brand cohesion as expressed in the copy
2. Style alignment with target audience
3. Professional appearance
4. Brand differentiation
Score overall brand style from 0 to 100.
"""

    def build_input(self, page: ExtractedPage) -> str:
        return "\n".join([
            self.field("Website URL", page.url, 300),
            self.field("Title", page.title, 200),
            self.field("H1", page.h1, 200),
            self.field("Hero Section", page.hero_section, 600),
            self.field("Body Content", page.text_content, self.input_budget),
            self.field("Social Profile", self.context.social_url, 300),
        ])
