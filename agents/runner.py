"""Single-call agent runner: timeout, shape validation and fallback."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union

from utils.llm_client import LLMClient
from utils.scoring import AgentName, AgentResult
from utils.errors import AgentError, LLMError
from .fallbacks import category_fallback, category_for_prompt

logger = logging.getLogger(__name__)

RAW_EXCERPT_CHARS = 200


@dataclass
class ValidResponse:
    result: AgentResult


@dataclass
class MalformedResponse:
    raw_text: str


ParsedResponse = Union[ValidResponse, MalformedResponse]


@dataclass
class AgentOutcome:
    """What one agent produced and whether it came from the model."""
    agent_name: str
    result: AgentResult
    genuine: bool
    error: str = ""


def parse_agent_response(raw_text: str) -> ParsedResponse:
    """Interpret generated content as an AgentResult, or tag it malformed."""
    data = LLMClient.parse_json_response(raw_text)
    result = AgentResult.from_dict(data)
    if result is None:
        return MalformedResponse(raw_text or "")
    return ValidResponse(result)


def fallback_for(agent_name: Optional[AgentName], raw_text: str = "") -> AgentResult:
    """Category fallback, with an excerpt of unusable model output up front."""
    result = category_fallback(agent_name)
    excerpt = (raw_text or "").strip()[:RAW_EXCERPT_CHARS]
    if excerpt:
        result.insights.insert(0, f"Raw analysis: {excerpt}")
    return result


class AgentRunner:
    """
    Runs one analysis prompt against the LLM.

    ``run`` never raises: timeouts, provider errors and unusable output all
    degrade to the category fallback so one bad call cannot sink an audit.
    """

    def __init__(
        self,
        llm: LLMClient,
        timeout: float = 5.0,
        temperature: float = 0.2,
        max_tokens: int = 500,
    ):
        self.llm = llm
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens

    @classmethod
    def from_config(cls, llm: LLMClient, config) -> "AgentRunner":
        return cls(
            llm,
            timeout=config.agent_timeout,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

    async def run(
        self,
        prompt: str,
        input_text: str,
        agent_name: Optional[AgentName] = None,
    ) -> AgentOutcome:
        name = agent_name or category_for_prompt(prompt)
        label = name.value if name else "unknown"

        if not self.llm.is_available():
            return self._fallback(label, name, "LLM not configured")

        try:
            raw_text = await asyncio.wait_for(
                self.llm.complete_async(
                    input_text,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                    system=prompt,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            return self._fallback(label, name, f"timed out after {self.timeout}s")
        except LLMError as e:
            return self._fallback(label, name, str(e))
        except Exception as e:
            return self._fallback(label, name, f"unexpected error: {e}")

        parsed = parse_agent_response(raw_text)
        if isinstance(parsed, MalformedResponse):
            return self._fallback(label, name, "malformed response", parsed.raw_text)

        return AgentOutcome(agent_name=label, result=parsed.result, genuine=True)

    def _fallback(self, label: str, name: Optional[AgentName], reason: str, raw_text: str = "") -> AgentOutcome:
        error = AgentError(label, reason)
        logger.warning("%s; using fallback result", error)
        return AgentOutcome(
            agent_name=label,
            result=fallback_for(name, raw_text),
            genuine=False,
            error=str(error),
        )
