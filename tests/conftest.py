import asyncio
import json

import pytest

from agents import PANEL
from orchestrator.context_store import ExtractedPage
from storage import InMemoryRecordStore
from utils.config import AuditConfig
from utils.errors import LLMError, PersistenceError


SAMPLE_HTML = """
<html>
<head>
  <title>Acme Analytics | Dashboards for Teams</title>
  <meta name="description" content="Acme turns your data into dashboards in minutes.">
  <style>.hero { color: red; }</style>
  <script>var secret = "do-not-leak";</script>
</head>
<body>
  <nav>Home Pricing About</nav>
  <section class="hero main-hero">
    <h1>Dashboards   your team will actually use</h1>
    <p>Connect your data and share insights in minutes.</p>
    <script>trackHero("also-hidden");</script>
    <a href="/signup">Start free trial</a>
  </section>
  <section><h2>Why Acme</h2><p>Trusted by 2,000 companies.</p></section>
</body>
</html>
"""


def agent_for(system: str) -> str:
    """Panel agent name whose system prompt produced ``system``."""
    for agent_class in PANEL:
        if agent_class.system_prompt.strip() in (system or ""):
            return agent_class.agent_name.value
    return "unknown"


def agent_json(score, insights=None, recommendations=None) -> str:
    return json.dumps({
        "score": score,
        "insights": insights if insights is not None else ["insight"],
        "recommendations": recommendations if recommendations is not None else ["recommendation"],
    })


class FakeLLM:
    """Stands in for LLMClient. ``responses`` maps agent name to text, an exception, or a delay."""

    def __init__(self, responses=None, default=None, delay=0.0, available=True):
        self.responses = responses or {}
        self.default = default
        self.delay = delay
        self.available = available
        self.calls = []

    def is_available(self):
        return self.available

    async def complete_async(self, prompt, max_tokens=500, temperature=0.2, system=None):
        name = agent_for(system)
        self.calls.append({"agent": name, "prompt": prompt, "system": system,
                           "max_tokens": max_tokens, "temperature": temperature})
        if self.delay:
            await asyncio.sleep(self.delay)
        response = self.responses.get(name, self.default)
        if isinstance(response, Exception):
            raise response
        if response is None:
            raise LLMError("fake", "API error: 503", status_code=503)
        return response


class FakeScraper:
    def __init__(self, page=None, store=None):
        self.page = page
        self.store = store
        self.urls = []
        self.records_at_fetch = None

    async def extract_async(self, url):
        self.urls.append(url)
        if self.store is not None:
            self.records_at_fetch = [dict(r) for r in self.store.records.values()]
        return self.page or ExtractedPage(
            url=url,
            title="Acme Analytics",
            meta_description="Dashboards in minutes.",
            h1="Dashboards your team will use",
            hero_section="Dashboards your team will use. Start free trial",
            text_content="Dashboards your team will use. Trusted by 2,000 companies.",
        )


class FailingInsertStore(InMemoryRecordStore):
    def insert(self, record):
        raise PersistenceError("insert", "connection refused")


class FailingUpdateStore(InMemoryRecordStore):
    def update(self, record_id, fields):
        raise PersistenceError("update", "connection reset")


@pytest.fixture
def config():
    return AuditConfig(agent_timeout=1.0, block_private_hosts=False)


@pytest.fixture
def store():
    return InMemoryRecordStore()
