"""Audit recording package."""

from fincorp.audit.recorder import AuditRecorder

__all__ = ["AuditRecorder"]
