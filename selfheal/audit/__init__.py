"""Audit subsystem — rotating append-only transition log."""

from .log import AppendResult, AuditLogger, LogLevel, rotated_path
