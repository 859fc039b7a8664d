from datetime import timedelta

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

import routes
from auth.quota import QuotaLedger, create_anonymous_ledger
from core.config import Config, DEV_SECRET_KEY
from core.errors import register_error_handlers
from core.extensions import init_extensions
from core.hooks import register_hooks
from core.logging import configure_logging
from security.headers import init_security_headers
from services.ai.router import get_completion_client


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    configure_logging(app)

    app.secret_key = app.config.get("SECRET_KEY")
    if app.config.get("ENV") not in ("development", "testing"):
        assert app.secret_key and app.secret_key != DEV_SECRET_KEY, \
            "SECURITY: set SECRET_KEY to a strong value"

    # 쿠키 기본 설정 (인증 제공자 로그인 세션)
    app.config.update(
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        PERMANENT_SESSION_LIFETIME=timedelta(days=30),
    )
    # dev/prod 분기
    app.config["SESSION_COOKIE_SECURE"] = (app.config.get("ENV") not in ("development", "testing"))

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)

    init_extensions(app)
    init_security_headers(app)

    # 요청 간 공유되는 유일한 가변 상태: quota ledger
    app.quota_ledger = QuotaLedger(create_anonymous_ledger(app.config))
    app.completion_client_factory = get_completion_client

    register_hooks(app)
    register_error_handlers(app)
    routes.register_routes(app)

    app.logger.info(
        "[BOOT] env=%s provider=%s anon_ledger=%s db=%s",
        app.config.get("ENV"),
        app.config.get("PROVIDER_DEFAULT"),
        app.config.get("ANON_LEDGER_BACKEND"),
        app.config.get("SQLALCHEMY_DATABASE_URI", "").split("@")[-1],
    )
    return app
