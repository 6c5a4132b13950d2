"""Problem Articulation Analysis Agent."""

from .base_agent import BaseAgent
from orchestrator.context_store import ExtractedPage
from utils.scoring import AgentName


class ProblemAgent(BaseAgent):
    """Rates how well the site names its audience's problem and the fix."""

    agent_name = AgentName.PROBLEM
    agent_description = "Analyzes problem-solution articulation"
    weight = 0.20
    input_budget = 1500

    system_prompt = """
You are a problem articulation specialist. Analyze how well the website communicates:
1. Target audience pain points
2. Problem-solution fit clarity
3. Jargon vs user-friendly language
4. Emotional connection
Score problem articulation from 0 to 100.
"""

    def build_input(self, page: ExtractedPage) -> str:
        return "\n".join([
            self.field("H1", page.h1, 200),
            self.field("Hero Section", page.hero_section, 600),
            self.field("Body Content", page.text_content, self.input_budget),
        ])
