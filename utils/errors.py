"""Structured error types for the website audit system."""

class AuditError(Exception):
    """Base exception for audit errors."""
    pass

class InputError(AuditError):
    """Error for invalid input (missing or unparseable URLs)."""
    def __init__(self, message: str, details: str = ""):
        self.details = details
        super().__init__(message)

class ConfigError(AuditError):
    """Error for invalid server configuration (bad environment values)."""
    def __init__(self, message: str, setting: str = ""):
        self.setting = setting
        super().__init__(message)

class AgentError(AuditError):
    """Error raised by an agent during analysis."""
    def __init__(self, agent_name: str, message: str):
        self.agent_name = agent_name
        super().__init__(f"Agent '{agent_name}': {message}")

class LLMError(AuditError):
    """Error related to LLM API calls."""
    def __init__(self, provider: str, message: str, status_code: int = 0):
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"LLM ({provider}): {message}")

class ScrapingError(AuditError):
    """Error during web scraping."""
    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Scraping '{url}': {message}")

class PersistenceError(AuditError):
    """Error reading or writing audit records."""
    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"Record store {operation}: {message}")
