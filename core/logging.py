import logging

from flask import g, has_request_context

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"


class RequestIdFilter(logging.Filter):
    """Stamps every record with the current request's correlation id ("-" outside requests)."""

    def filter(self, record):
        rid = "-"
        if has_request_context():
            rid = getattr(g, "request_id", None) or "-"
        record.request_id = rid
        return True


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL") or "INFO"), logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    # 재호출(테스트에서 create_app 여러 번) 시 핸들러 중복 방지
    for h in list(root.handlers):
        if getattr(h, "_support_reply", False):
            root.removeHandler(h)
    handler._support_reply = True
    root.addHandler(handler)
    root.setLevel(level)

    app.logger.setLevel(level)
