"""Utilities package for website audit tool."""

from .errors import AuditError, InputError, ConfigError, AgentError, LLMError, ScrapingError, PersistenceError
from .scoring import AgentName, AgentResult, AuditReport, ScoreBand, score_band
from .config import AuditConfig, load_env_file
from .llm_client import LLMClient

__all__ = [
    'AuditError', 'InputError', 'ConfigError', 'AgentError', 'LLMError', 'ScrapingError', 'PersistenceError',
    'AgentName', 'AgentResult', 'AuditReport', 'ScoreBand', 'score_band',
    'AuditConfig', 'load_env_file',
    'LLMClient',
]
