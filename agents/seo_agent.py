"""SEO and Copywriting Analysis Agent."""

from .base_agent import BaseAgent
from orchestrator.context_store import ExtractedPage
from utils.scoring import AgentName


class SEOAgent(BaseAgent):
    """
    Analyzes on-page SEO fundamentals and copy quality.

    Evaluates:
    - Title tag and meta description
    - Heading usage
    - Keyword relevance
    - Readability and persuasiveness of the copy
    """

    agent_name = AgentName.SEO
    agent_description = "Analyzes SEO fundamentals and copywriting"
    weight = 0.15
    input_budget = 500

    system_prompt = """
You are an SEO and copywriting expert. Analyze the content for:
1. SEO fundamentals (title, meta, headings)
2. Content quality and readability
3. Keyword usage and relevance
4. Copy persuasiveness
Score overall SEO health from 0 to 100.
"""

    def build_input(self, page: ExtractedPage) -> str:
        return "\n".join([
            self.field("Website URL", page.url, 300),
            self.field("Title", page.title, 200),
            self.field("Meta Description", page.meta_description, 300),
            self.field("H1", page.h1, 200),
            self.field("Content Excerpt", page.text_content, self.input_budget),
        ])
