"""Main orchestrator for coordinating the audit pipeline."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Type

from .context_store import ContextStore, AuditRequest, AuditStatus, AgentStatus
from agents import PANEL, BaseAgent, AgentRunner
from storage import RecordStore
from utils.config import AuditConfig
from utils.errors import PersistenceError
from utils.llm_client import LLMClient
from utils.scoring import AuditReport, AgentResult, build_top_recommendations, compute_overall_score
from utils.scraper import WebScraper

logger = logging.getLogger(__name__)


@dataclass
class AuditResponse:
    """What the caller gets back: record id, report and final record status."""
    id: str
    report: AuditReport
    status: str


class Orchestrator:
    """
    Main coordinator for one website audit.

    Manages:
    - Request validation and URL normalization
    - Record creation before any network work
    - Page extraction
    - Concurrent fan-out to the agent panel
    - Score aggregation and record finalization
    """

    def __init__(
        self,
        config: AuditConfig,
        store: RecordStore,
        llm_client: Optional[LLMClient] = None,
        scraper: Optional[WebScraper] = None,
        panel: Sequence[Type[BaseAgent]] = PANEL,
        progress_callback=None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Pipeline configuration
            store: Record store for audit records
            llm_client: LLM client shared by all agents
            scraper: Page extractor
            panel: Agent classes to run, in report order
            progress_callback: Optional callback(phase, status, detail) for progress updates
        """
        self.config = config
        self.store = store
        self.llm = llm_client or LLMClient.from_config(config)
        self.scraper = scraper or WebScraper.from_config(config)
        self.runner = AgentRunner.from_config(self.llm, config)
        self.panel = tuple(panel)
        self.progress_callback = progress_callback

    @property
    def weights(self) -> Dict[str, float]:
        return {agent_class.agent_name.value: agent_class.weight for agent_class in self.panel}

    def _progress(self, phase: str, status: str, detail: str = ""):
        if self.progress_callback:
            self.progress_callback(phase=phase, status=status, detail=detail)

    async def run_audit(self, request: AuditRequest) -> AuditResponse:
        """
        Execute the full audit workflow.

        Raises InputError for a missing or invalid URL (no record is
        created) and PersistenceError if the initial record cannot be
        written. Every later failure degrades the report instead.
        """
        website_url = request.normalized_url()
        context = ContextStore(
            website_url=website_url,
            social_url=request.social_url,
            email=request.email,
        )
        logger.info("Starting audit for: %s", website_url)

        record = await asyncio.to_thread(self.store.insert, context.initial_record())
        context.audit_id = record["id"]

        self._progress("Extracting", "started", website_url)
        page = await self.scraper.extract_async(website_url)
        context.set_page(page)
        if page.degraded:
            logger.warning("Continuing with degraded page content for %s", website_url)
        else:
            logger.info("Website scraped successfully")
        self._progress("Extracting", "completed", "")

        self._progress("Agent Analysis", "started", f"Running {len(self.panel)} agents")
        await self.run_agents(context)
        logger.info("All agents completed")
        self._progress("Agent Analysis", "completed", "")

        self._progress("Aggregation", "started", "")
        report = self.build_report(context)

        status = AuditStatus.COMPLETED.value
        try:
            await asyncio.to_thread(self.store.update, context.audit_id, {
                "audit_results": report.to_dict(),
                "overall_score": report.overall_score,
                "status": status,
            })
        except PersistenceError as e:
            logger.error("Database update error for audit %s: %s", context.audit_id, e)
            status = AuditStatus.PROCESSING.value
        except Exception as e:
            logger.error("Unexpected error finalizing audit %s: %s", context.audit_id, e)
            status = AuditStatus.PROCESSING.value

        logger.info("Audit %s finished with overall score %d", context.audit_id, report.overall_score)
        self._progress("Complete", "completed", "Audit finished")
        return AuditResponse(id=context.audit_id, report=report, status=status)

    async def run_agents(self, context: ContextStore) -> List:
        """Run every panel agent concurrently and wait for all of them."""
        agents = [agent_class(context, self.runner) for agent_class in self.panel]
        analyses = await asyncio.gather(*(agent.execute() for agent in agents))

        fallback_count = sum(1 for a in analyses if a.status == AgentStatus.FALLBACK)
        if fallback_count:
            logger.info("%d/%d agents used fallback results", fallback_count, len(analyses))
        return list(analyses)

    def build_report(self, context: ContextStore) -> AuditReport:
        """Aggregate agent analyses into the final report."""
        results: Dict[str, AgentResult] = {}
        genuine: Dict[str, bool] = {}
        for agent_class in self.panel:
            name = agent_class.agent_name.value
            analysis = context.get_analysis(name)
            if analysis is None or analysis.result is None:
                continue
            results[name] = analysis.result
            genuine[name] = analysis.genuine

        overall_score = compute_overall_score(
            results, self.weights, genuine, mode=self.config.scoring_mode
        )

        return AuditReport(
            website_url=context.website_url,
            social_url=context.social_url,
            overall_score=overall_score,
            agents=results,
            top_recommendations=build_top_recommendations(results),
            extracted_page=context.page,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
