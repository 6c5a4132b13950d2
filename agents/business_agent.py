"""Business Positioning Analysis Agent."""

from .base_agent import BaseAgent
from orchestrator.context_store import ExtractedPage
from utils.scoring import AgentName


class BusinessAgent(BaseAgent):
    """
    Analyzes business model and market positioning.

    Evaluates:
    - Business model and positioning
    - Target audience
    - Authority and credibility signals
    - Tone and brand personality
    """

    agent_name = AgentName.BUSINESS
    agent_description = "Analyzes business positioning and audience"
    weight = 0.15
    input_budget = 1500

    system_prompt = """
You are a business analyst expert. Analyze the website and social profile data to determine:
1. Business model and positioning
2. Target audience
3. Authority and credibility signals
4. Tone and brand personality
Score overall business clarity from 0 to 100.
"""

    def build_input(self, page: ExtractedPage) -> str:
        return "\n".join([
            self.field("Website URL", page.url, 300),
            self.field("Title", page.title, 200),
            self.field("Meta Description", page.meta_description, 300),
            self.field("H1", page.h1, 200),
            self.field("Body Content", page.text_content, self.input_budget),
            self.field("Social Profile", self.context.social_url, 300),
        ])
