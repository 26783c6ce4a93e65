"""Authored Logging — hexagonal logging port and structlog adapter."""

from authored.logging.port import LoggingPort
from authored.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
