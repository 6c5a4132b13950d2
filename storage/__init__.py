"""Persistence for audit records."""

from .record_store import RecordStore, InMemoryRecordStore
from .sql_store import SQLRecordStore, WebsiteAudit

__all__ = ['RecordStore', 'InMemoryRecordStore', 'SQLRecordStore', 'WebsiteAudit']
