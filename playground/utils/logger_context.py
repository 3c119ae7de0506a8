import logging
from typing import Any, Dict


class ContextLogger(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        kwargs.setdefault("extra", {})
        kwargs["extra"].setdefault("extra_data", {})
        # Adapter context goes under record.extra_data (read by JsonLogFormatter)
        kwargs["extra"]["extra_data"].update(self.extra)
        return msg, kwargs


def with_context(logger: logging.Logger, **ctx: Any) -> ContextLogger:
    """
    Return a LoggerAdapter that adds context fields (e.g. component,
    session_id) to every log line.
    """
    context: Dict[str, Any] = dict(ctx)
    return ContextLogger(logger, context)
