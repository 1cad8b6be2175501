import logging
import os
from loki_logger_handler.loki_logger_handler import LokiLoggerHandler  # type: ignore
from flask import has_request_context, request, g
from .models.config import config


class RequestContextFilter(logging.Filter):
    """Attach request details to records emitted while serving a request."""

    def filter(self, record):
        if has_request_context():
            record.method = request.method
            record.path = request.path
            record.remote_addr = request.remote_addr
            if hasattr(g, 'request_id'):
                record.request_id = g.request_id
        return True


logger = logging.getLogger("vidshelf")
logger.setLevel(config.log_level)

if config.debug:
    logger.addHandler(logging.StreamHandler())

logger.addFilter(RequestContextFilter())

if config.loki_url:
    custom_handler = LokiLoggerHandler(
        url=config.loki_url,
        labels={
            "application": "vidshelf",
            "environment": config.environment,
            "service": config.service_name,
            "version": os.getenv("VERSION", "unknown")
        },
        label_keys={},
        enable_structured_loki_metadata=True,
        timeout=10,
    )
    logger.addHandler(custom_handler)
