"""File operations, safe deletion and the audit trail."""

from .file_service import FileService
from .audit_log import DeletionAuditLog
from .deleter import SafeDeleter
from .duplicate_service import DuplicateService

__all__ = ["FileService", "DeletionAuditLog", "SafeDeleter", "DuplicateService"]
