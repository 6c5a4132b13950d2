"""Shared context store for a single audit run."""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
from enum import Enum
from datetime import datetime, timezone
from urllib.parse import urlparse

from utils.errors import InputError

DEGRADED_TEXT = "Unable to load website content"


class AuditStatus(Enum):
    """Lifecycle of a persisted audit record."""
    PROCESSING = "processing"
    COMPLETED = "completed"


class AgentStatus(Enum):
    """Status of an agent's execution."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FALLBACK = "fallback"


def normalize_url(raw: Optional[str]) -> str:
    """
    Normalize a user-supplied website URL.

    Bare domains get an ``https://`` prefix. Raises InputError when the
    value is missing or still does not parse as an http(s) URL.
    """
    if raw is None or not str(raw).strip():
        raise InputError("Website URL is required")

    url = str(raw).strip()
    if not re.match(r'^[a-zA-Z][a-zA-Z0-9+.-]*://', url):
        url = f"https://{url}"

    parsed = urlparse(url)
    host = parsed.hostname or ""
    if parsed.scheme not in ("http", "https") or not host or re.search(r'\s', parsed.netloc):
        raise InputError("Invalid website URL", details=f"Could not parse {raw!r} as a URL")
    return url


@dataclass
class AuditRequest:
    """Inbound audit request."""
    website_url: Optional[str]
    social_url: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuditRequest":
        return cls(
            website_url=data.get("website_url"),
            social_url=data.get("social_url") or None,
            email=data.get("email") or None,
        )

    def normalized_url(self) -> str:
        return normalize_url(self.website_url)


@dataclass(frozen=True)
class ExtractedPage:
    """Bounded text fragments extracted from the audited page."""
    url: str
    title: str = ""
    meta_description: str = ""
    h1: str = ""
    hero_section: str = ""
    text_content: str = ""
    degraded: bool = False

    @classmethod
    def unavailable(cls, url: str) -> "ExtractedPage":
        """Placeholder page used when the site cannot be fetched."""
        return cls(url=url, text_content=DEGRADED_TEXT, degraded=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "metaDescription": self.meta_description,
            "h1": self.h1,
            "heroSection": self.hero_section,
            "textContent": self.text_content,
            "url": self.url,
        }


@dataclass
class AgentAnalysis:
    """Result from an agent's analysis."""
    agent_name: str
    status: AgentStatus = AgentStatus.PENDING
    result: Optional[Any] = None  # AgentResult
    errors: List[str] = field(default_factory=list)
    started_at: str = ""
    completed_at: str = ""

    @property
    def genuine(self) -> bool:
        return self.status == AgentStatus.COMPLETED


@dataclass
class ContextStore:
    """
    Shared state container for one audit.

    The orchestrator fills it in as the run progresses; agents read the
    extracted page from it and the aggregation step reads their analyses.
    """
    website_url: str = ""
    social_url: Optional[str] = None
    email: Optional[str] = None
    audit_id: str = ""

    page: Optional[ExtractedPage] = None
    analyses: Dict[str, AgentAnalysis] = field(default_factory=dict)

    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    last_updated: str = ""

    def update_timestamp(self):
        """Update the last_updated timestamp."""
        self.last_updated = datetime.now(timezone.utc).isoformat()

    def set_page(self, page: ExtractedPage):
        self.page = page
        self.update_timestamp()

    def get_analysis(self, agent_name: str) -> Optional[AgentAnalysis]:
        """Get analysis by agent name."""
        return self.analyses.get(agent_name)

    def set_analysis(self, analysis: AgentAnalysis):
        """Set analysis for an agent."""
        self.analyses[analysis.agent_name] = analysis
        self.update_timestamp()

    def initial_record(self) -> Dict[str, Any]:
        """Row written to the record store before any network work."""
        return {
            "website_url": self.website_url,
            "social_url": self.social_url,
            "email": self.email,
            "audit_results": {},
            "status": AuditStatus.PROCESSING.value,
        }

    def get_summary(self) -> Dict:
        """Get a summary of the context store state."""
        return {
            'website': self.website_url,
            'page_degraded': bool(self.page and self.page.degraded),
            'analyses_completed': sum(1 for a in self.analyses.values()
                                      if a.status == AgentStatus.COMPLETED),
            'analyses_fallback': sum(1 for a in self.analyses.values()
                                     if a.status == AgentStatus.FALLBACK),
        }
