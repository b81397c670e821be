"""
Interface for the audit log collaborator.

The dispatcher hands one record per terminal dispatch outcome to the audit
log. Writing is fire-and-forget from the dispatcher's perspective.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from prompt_console.core.constants import AUDIT_LOG_TYPE
from prompt_console.core.interfaces.model_bases import InternalDTO


@dataclass
class AuditLogRecord(InternalDTO):
    """Structured audit entry."""

    properties: dict[str, str] = field(default_factory=dict)
    exception: BaseException | None = None
    type: str = AUDIT_LOG_TYPE

    def add_property(self, name: str, value: object) -> None:
        self.properties[name] = "" if value is None else str(value)


class IAuditLog(ABC):
    @abstractmethod
    def add_log(self, record: AuditLogRecord) -> None:
        """Accept a record without blocking the caller on the write."""
