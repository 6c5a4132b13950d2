"""Base agent class for all audit agents."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import datetime, timezone
import logging

from orchestrator.context_store import ContextStore, AgentAnalysis, AgentStatus, ExtractedPage
from utils.errors import AgentError
from utils.scoring import AgentName
from .runner import AgentRunner, AgentOutcome, fallback_for

logger = logging.getLogger(__name__)

JSON_INSTRUCTIONS = (
    "Respond with only a JSON object of the form "
    '{"score": <integer 0-100>, "insights": [<3 short strings>], '
    '"recommendations": [<3 short, actionable strings>]}. '
    "Do not include any text outside the JSON object."
)


class BaseAgent(ABC):
    """
    Abstract base class for the panel agents.

    Each agent:
    - Reads the extracted page from the shared ContextStore
    - Builds its own input from the fields relevant to its analysis
    - Runs its prompt through the AgentRunner (timeout + fallback)
    - Writes its AgentAnalysis back to the ContextStore
    """

    # Class attributes that subclasses should override
    agent_name: AgentName
    agent_description: str = "Base agent"
    weight: float = 1.0  # Scoring weight for this agent
    input_budget: int = 1500  # Max characters of page text sent to the model
    system_prompt: str = ""

    def __init__(self, context: ContextStore, runner: AgentRunner):
        """
        Initialize the agent.

        Args:
            context: Shared context store
            runner: Runner that wraps the LLM call with timeout and fallback
        """
        self.context = context
        self.runner = runner
        self._analysis: Optional[AgentAnalysis] = None

    @property
    def name(self) -> str:
        return self.agent_name.value

    @property
    def prompt(self) -> str:
        return f"{self.system_prompt.strip()}\n\n{JSON_INSTRUCTIONS}"

    @property
    def analysis(self) -> AgentAnalysis:
        """Get or create the agent's analysis record."""
        if self._analysis is None:
            existing = self.context.get_analysis(self.name)
            self._analysis = existing or AgentAnalysis(agent_name=self.name)
        return self._analysis

    @abstractmethod
    def build_input(self, page: ExtractedPage) -> str:
        """Assemble the user message from the page fields this agent needs."""

    @staticmethod
    def field(label: str, value: Optional[str], limit: int) -> str:
        """One ``Label: value`` line, truncated to ``limit`` characters."""
        value = (value or "").strip()[:limit]
        return f"{label}: {value or 'Not provided'}"

    async def execute(self) -> AgentAnalysis:
        """
        Run the agent and record its analysis.

        Never raises; any failure leaves a fallback result in the analysis.
        """
        analysis = self.analysis
        analysis.status = AgentStatus.RUNNING
        analysis.started_at = datetime.now(timezone.utc).isoformat()
        self.context.set_analysis(analysis)

        try:
            page = self.context.page or ExtractedPage.unavailable(self.context.website_url)
            user_input = self.build_input(page)
            outcome = await self.runner.run(self.prompt, user_input, self.agent_name)
        except Exception as e:
            error = AgentError(self.name, str(e))
            logger.warning("%s; using fallback result", error)
            outcome = AgentOutcome(
                agent_name=self.name,
                result=fallback_for(self.agent_name),
                genuine=False,
                error=str(error),
            )

        analysis.result = outcome.result
        analysis.status = AgentStatus.COMPLETED if outcome.genuine else AgentStatus.FALLBACK
        if outcome.error:
            analysis.errors.append(outcome.error)
        analysis.completed_at = datetime.now(timezone.utc).isoformat()

        self.context.set_analysis(analysis)
        return analysis

    def get_status_summary(self) -> str:
        """Get a human-readable status summary."""
        status = self.analysis.status.value
        if self.analysis.result is not None:
            return f"{self.name}: {status} - {self.analysis.result.score}/100"
        return f"{self.name}: {status}"
