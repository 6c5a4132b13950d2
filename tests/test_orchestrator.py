import asyncio
import time

import pytest

from agents import HeroAgent
from agents.fallbacks import FALLBACKS
from orchestrator.context_store import AuditRequest, ExtractedPage
from orchestrator.orchestrator import Orchestrator
from utils.config import AuditConfig
from utils.errors import InputError, LLMError, PersistenceError
from utils.scoring import GENERIC_RECOMMENDATIONS, AgentName

from conftest import FailingInsertStore, FailingUpdateStore, FakeLLM, FakeScraper, agent_json


def make_orchestrator(config, store, llm=None, scraper=None):
    return Orchestrator(
        config,
        store,
        llm_client=llm or FakeLLM(),
        scraper=scraper or FakeScraper(store=store),
    )


def run(orchestrator, **request):
    return asyncio.run(orchestrator.run_audit(AuditRequest(**request)))


def test_bare_domain_is_normalized_and_recorded_before_fetch(config, store):
    scraper = FakeScraper(store=store)
    orchestrator = make_orchestrator(config, store, scraper=scraper)

    response = run(orchestrator, website_url="example.com")

    assert scraper.urls == ["https://example.com"]
    assert len(scraper.records_at_fetch) == 1
    assert scraper.records_at_fetch[0]["status"] == "processing"
    assert scraper.records_at_fetch[0]["website_url"] == "https://example.com"
    assert response.report.website_url == "https://example.com"
    assert response.id in store.records


def test_all_agents_failing_still_completes(config, store):
    orchestrator = make_orchestrator(config, store, llm=FakeLLM())

    response = run(orchestrator, website_url="https://acme.test")

    report = response.report
    expected = sum(FALLBACKS[name].score for name in AgentName) / len(AgentName)
    assert report.overall_score == int(expected + 0.5) == 69
    assert list(report.agents) == [name.value for name in AgentName]
    assert report.agents["hero"].insights == FALLBACKS[AgentName.HERO].insights
    assert 1 <= len(report.top_recommendations) <= 5
    assert response.status == "completed"

    record = store.get(response.id)
    assert record["status"] == "completed"
    assert record["overall_score"] == 69
    assert set(record["audit_results"]["agents"]) == {name.value for name in AgentName}


def test_genuine_results_are_aggregated(config, store):
    llm = FakeLLM(default=agent_json(80, ["fine"], ["Do A", "Do B", "Do C"]))
    orchestrator = make_orchestrator(config, store, llm=llm)

    response = run(orchestrator, website_url="https://acme.test", social_url="https://x.com/acme")

    report = response.report
    assert report.overall_score == 80
    assert report.top_recommendations == ["Do A", "Do B", "Do A", "Do B", "Do A"]
    assert report.social_url == "https://x.com/acme"
    assert len(llm.calls) == 6
    assert {call["agent"] for call in llm.calls} == {name.value for name in AgentName}


def test_agents_run_concurrently(store):
    config = AuditConfig(agent_timeout=5.0, block_private_hosts=False)
    llm = FakeLLM(default=agent_json(75), delay=0.3)
    orchestrator = make_orchestrator(config, store, llm=llm)

    started = time.monotonic()
    response = run(orchestrator, website_url="https://acme.test")
    elapsed = time.monotonic() - started

    assert response.report.overall_score == 75
    assert elapsed < 1.2


def test_one_slow_agent_times_out_alone(store):
    config = AuditConfig(agent_timeout=0.2, block_private_hosts=False)

    class SlowHeroLLM(FakeLLM):
        async def complete_async(self, prompt, max_tokens=500, temperature=0.2, system=None):
            if HeroAgent.system_prompt.strip() in system:
                await asyncio.sleep(5)
            return agent_json(90)

    orchestrator = make_orchestrator(config, store, llm=SlowHeroLLM())

    started = time.monotonic()
    response = run(orchestrator, website_url="https://acme.test")

    assert time.monotonic() - started < 2.0
    assert response.report.agents["hero"].score == FALLBACKS[AgentName.HERO].score
    assert response.report.agents["seo"].score == 90


OUTCOMES = {
    "valid": agent_json(83, ["ok"], ["Fix it"]),
    "blank_recs": agent_json(40, [], ["", "  "]),
    "out_of_range": agent_json(150, ["high"], ["Keep going"]),
    "prose": "Looks decent overall.",
    "error": LLMError("fake", "API error: 500", status_code=500),
}


@pytest.mark.parametrize("hero,conversion,seo,others", [
    ("valid", "valid", "valid", "valid"),
    ("blank_recs", "blank_recs", "blank_recs", "error"),
    ("out_of_range", "prose", "error", "blank_recs"),
    ("error", "error", "error", "error"),
    ("prose", "blank_recs", "valid", "out_of_range"),
])
def test_report_is_well_formed_for_any_mix(config, store, hero, conversion, seo, others):
    responses = {name.value: OUTCOMES[others] for name in AgentName}
    responses.update({"hero": OUTCOMES[hero], "conversion": OUTCOMES[conversion], "seo": OUTCOMES[seo]})
    orchestrator = make_orchestrator(config, store, llm=FakeLLM(responses))

    report = run(orchestrator, website_url="https://acme.test").report

    assert isinstance(report.overall_score, int)
    assert 0 <= report.overall_score <= 100
    assert 1 <= len(report.top_recommendations) <= 5
    for result in report.agents.values():
        assert 0 <= result.score <= 100
        assert isinstance(result.insights, list)
        assert isinstance(result.recommendations, list)


def test_weighted_mode_counts_genuine_results_only(store):
    config = AuditConfig(scoring_mode="weighted", block_private_hosts=False)
    llm = FakeLLM({"hero": agent_json(90)})
    orchestrator = make_orchestrator(config, store, llm=llm)

    response = run(orchestrator, website_url="https://acme.test")

    assert response.report.overall_score == 90


def test_degraded_page_still_produces_report(config, store):
    scraper = FakeScraper(page=ExtractedPage.unavailable("https://down.test"), store=store)
    llm = FakeLLM(default=agent_json(55, [], []))
    orchestrator = make_orchestrator(config, store, llm=llm, scraper=scraper)

    response = run(orchestrator, website_url="https://down.test")

    assert response.report.extracted_page.degraded is True
    assert response.report.overall_score == 55
    assert response.report.top_recommendations == GENERIC_RECOMMENDATIONS
    assert all("Unable to load website content" in call["prompt"] for call in llm.calls
               if call["agent"] in ("business", "problem", "conversion"))


@pytest.mark.parametrize("website_url", [None, "", "   "])
def test_missing_url_creates_no_record(config, store, website_url):
    scraper = FakeScraper(store=store)
    orchestrator = make_orchestrator(config, store, scraper=scraper)

    with pytest.raises(InputError):
        run(orchestrator, website_url=website_url)
    assert store.records == {}
    assert scraper.urls == []


def test_invalid_url_is_rejected(config, store):
    orchestrator = make_orchestrator(config, store)

    with pytest.raises(InputError) as excinfo:
        run(orchestrator, website_url="ftp://files.test")
    assert str(excinfo.value) == "Invalid website URL"
    assert store.records == {}


def test_insert_failure_aborts_before_fetch(config):
    store = FailingInsertStore()
    scraper = FakeScraper()
    orchestrator = make_orchestrator(config, store, scraper=scraper)

    with pytest.raises(PersistenceError):
        run(orchestrator, website_url="https://acme.test")
    assert scraper.urls == []


def test_update_failure_returns_report_with_processing_status(config):
    store = FailingUpdateStore()
    orchestrator = make_orchestrator(config, store)

    response = run(orchestrator, website_url="https://acme.test")

    assert response.status == "processing"
    assert response.report.overall_score == 69
    assert store.get(response.id)["status"] == "processing"


def test_progress_callback_reports_phases(config, store):
    phases = []
    orchestrator = Orchestrator(
        config, store,
        llm_client=FakeLLM(),
        scraper=FakeScraper(),
        progress_callback=lambda phase, status, detail: phases.append((phase, status)),
    )

    run(orchestrator, website_url="https://acme.test")

    assert phases[0] == ("Extracting", "started")
    assert ("Agent Analysis", "completed") in phases
    assert phases[-1] == ("Complete", "completed")
