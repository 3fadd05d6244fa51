# -*- coding: utf-8 -*-
"""
Routes uvicorn and FastAPI logs through loguru.
"""

import logging

from cbt_admin.config.logger import InterceptHandler


def setup_uvicorn_logging():
    """Replace the handlers of uvicorn's loggers with the loguru interceptor."""
    for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error", "fastapi"]:
        logger_obj = logging.getLogger(logger_name)
        logger_obj.handlers.clear()
        logger_obj.propagate = False

    logging.getLogger("uvicorn").handlers = [InterceptHandler()]
    logging.getLogger("uvicorn.error").handlers = [InterceptHandler()]
    logging.getLogger("fastapi").handlers = [InterceptHandler()]
