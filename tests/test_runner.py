import asyncio
import time

from agents import HeroAgent, SEOAgent
from agents.fallbacks import FALLBACKS, GENERIC_FALLBACK, category_fallback, category_for_prompt
from agents.runner import (
    AgentRunner,
    MalformedResponse,
    ValidResponse,
    fallback_for,
    parse_agent_response,
)
from utils.errors import LLMError
from utils.scoring import AgentName

from conftest import FakeLLM, agent_json


def hero_prompt():
    return HeroAgent.system_prompt


def seo_prompt():
    return SEOAgent.system_prompt


def test_valid_response_is_returned_unmodified():
    response = agent_json(92, ["Clear headline", "Strong CTA", "Good contrast"], ["Add a subheadline"])
    runner = AgentRunner(FakeLLM({"hero": response}), timeout=1.0)

    outcome = asyncio.run(runner.run(hero_prompt(), "Hero Section: ...", AgentName.HERO))

    assert outcome.genuine is True
    assert outcome.agent_name == "hero"
    assert outcome.result.score == 92
    assert outcome.result.insights == ["Clear headline", "Strong CTA", "Good contrast"]
    assert outcome.result.recommendations == ["Add a subheadline"]


def test_response_in_code_fence_is_accepted():
    response = "```json\n" + agent_json(81) + "\n```"
    runner = AgentRunner(FakeLLM({"hero": response}))

    outcome = asyncio.run(runner.run(hero_prompt(), "input", AgentName.HERO))

    assert outcome.genuine is True
    assert outcome.result.score == 81


def test_prose_response_gives_category_fallback_with_excerpt():
    prose = "The page has good SEO."
    runner = AgentRunner(FakeLLM({"seo": prose}))

    outcome = asyncio.run(runner.run(seo_prompt(), "input", AgentName.SEO))

    canned = FALLBACKS[AgentName.SEO]
    assert outcome.genuine is False
    assert outcome.result.score == canned.score
    assert outcome.result.insights[0] == "Raw analysis: The page has good SEO."
    assert outcome.result.insights[1:] == canned.insights
    assert outcome.result.recommendations == canned.recommendations


def test_raw_excerpt_is_limited():
    runner = AgentRunner(FakeLLM({"seo": "x" * 1000}))

    outcome = asyncio.run(runner.run(seo_prompt(), "input", AgentName.SEO))

    assert outcome.result.insights[0] == "Raw analysis: " + "x" * 200


def test_wrong_shape_gives_fallback():
    runner = AgentRunner(FakeLLM({"hero": '{"score": "high", "insights": [], "recommendations": []}'}))

    outcome = asyncio.run(runner.run(hero_prompt(), "input", AgentName.HERO))

    assert outcome.genuine is False
    assert outcome.result.score == FALLBACKS[AgentName.HERO].score


def test_timeout_gives_fallback_promptly():
    runner = AgentRunner(FakeLLM({"hero": agent_json(90)}, delay=5.0), timeout=0.05)

    started = time.monotonic()
    outcome = asyncio.run(runner.run(hero_prompt(), "input", AgentName.HERO))
    elapsed = time.monotonic() - started

    assert elapsed < 1.0
    assert outcome.genuine is False
    assert "timed out" in outcome.error
    assert outcome.result.insights == FALLBACKS[AgentName.HERO].insights


def test_provider_error_gives_fallback():
    runner = AgentRunner(FakeLLM({"hero": LLMError("mistral", "API error: 429", status_code=429)}))

    outcome = asyncio.run(runner.run(hero_prompt(), "input", AgentName.HERO))

    assert outcome.genuine is False
    assert outcome.error.startswith("Agent 'hero':")
    assert "429" in outcome.error


def test_unavailable_llm_is_not_called():
    llm = FakeLLM({"hero": agent_json(90)}, available=False)
    runner = AgentRunner(llm)

    outcome = asyncio.run(runner.run(hero_prompt(), "input", AgentName.HERO))

    assert outcome.genuine is False
    assert llm.calls == []


def test_prompt_is_sent_as_system_message():
    llm = FakeLLM({"hero": agent_json(75)})
    runner = AgentRunner(llm, temperature=0.2, max_tokens=500)

    asyncio.run(runner.run(hero_prompt(), "Hero Section: Build faster", AgentName.HERO))

    call = llm.calls[0]
    assert call["system"] == hero_prompt()
    assert call["prompt"] == "Hero Section: Build faster"
    assert call["temperature"] == 0.2
    assert call["max_tokens"] == 500


def test_category_is_recognised_from_prompt_when_not_named():
    runner = AgentRunner(FakeLLM(default="not json"))

    outcome = asyncio.run(runner.run("You are an SEO specialist. Review the page.", "input"))

    assert outcome.agent_name == "seo"
    assert outcome.result.score == FALLBACKS[AgentName.SEO].score


def test_unknown_category_gives_generic_fallback():
    runner = AgentRunner(FakeLLM(default="not json"))

    outcome = asyncio.run(runner.run("Review the footer links.", "input"))

    assert outcome.agent_name == "unknown"
    assert outcome.result.score == GENERIC_FALLBACK.score
    assert outcome.result.recommendations == GENERIC_FALLBACK.recommendations


def test_category_for_prompt():
    assert category_for_prompt("Score the conversion barriers") == AgentName.CONVERSION
    assert category_for_prompt("") is None


def test_category_for_prompt_prefers_panel_order():
    assert category_for_prompt("A conversion expert reviewing the hero section") == AgentName.HERO
    assert category_for_prompt("SEO copy that drives conversion") == AgentName.SEO
    assert category_for_prompt("Business style guide") == AgentName.BUSINESS


def test_fallback_copies_are_independent():
    first = fallback_for(AgentName.HERO, "broken output")
    first.recommendations.append("extra")

    assert "extra" not in FALLBACKS[AgentName.HERO].recommendations
    assert category_fallback(AgentName.HERO).insights == FALLBACKS[AgentName.HERO].insights


def test_every_category_has_three_insights_and_recommendations():
    for name in AgentName:
        result = FALLBACKS[name]
        assert 0 <= result.score <= 100
        assert len(result.insights) == 3
        assert len(result.recommendations) == 3


def test_parse_agent_response():
    assert isinstance(parse_agent_response(agent_json(70)), ValidResponse)
    assert isinstance(parse_agent_response("I think it scores 70."), MalformedResponse)
    assert isinstance(parse_agent_response("[1, 2, 3]"), MalformedResponse)
    assert parse_agent_response(None).raw_text == ""
