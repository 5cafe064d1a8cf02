"""Logging infrastructure.

Structured logging on top of the standard library:

    import logging

    from graph_cache_service.infra.logging import setup_logging

    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Field cache ready", extra={"backend": "redis"})
"""

from graph_cache_service.infra.logging.config import configure_logging, setup_logging
from graph_cache_service.infra.logging.formatters import JSONFormatter

__all__ = ["JSONFormatter", "configure_logging", "setup_logging"]
