"""Orchestrator package for audit coordination.

Import the coordinator itself from ``orchestrator.orchestrator``; this
package only re-exports the context types so lower layers can use them
without pulling in the whole pipeline.
"""

from .context_store import (
    ContextStore,
    AuditRequest,
    AuditStatus,
    AgentStatus,
    AgentAnalysis,
    ExtractedPage,
    normalize_url,
)

__all__ = [
    'ContextStore',
    'AuditRequest',
    'AuditStatus',
    'AgentStatus',
    'AgentAnalysis',
    'ExtractedPage',
    'normalize_url',
]
