"""
Logging configuration
"""
import logging
import sys
from crewer.config import get_settings

settings = get_settings()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance"""
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    return logger


class WorkspaceLogAdapter(logging.LoggerAdapter):
    """Prefixes every record with the workspace it belongs to"""

    def process(self, msg, kwargs):
        return f"[workspace {self.extra['workspace_id']}] {msg}", kwargs


def workspace_logger(logger: logging.Logger, workspace_id: str) -> WorkspaceLogAdapter:
    return WorkspaceLogAdapter(logger, {"workspace_id": workspace_id})
