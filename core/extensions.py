# extensions.py
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from domain.models import db

# limiter는 객체만 만들고, 실제 설정(storage/default_limits)은 app.config에서 가져오도록
limiter = Limiter(key_func=get_remote_address)

cors = CORS()


def init_extensions(app):
    db.init_app(app)

    # 레이트리밋 초기화
    limiter.init_app(app)

    # CORS: /api/*만 허용 (익명 세션 쿠키 때문에 credentials 허용)
    cors.init_app(
        app,
        supports_credentials=True,
        resources={
            r"/api/*": {
                "origins": app.config.get("CORS_ORIGINS") or [],
                "methods": ["POST", "GET"],
                "allow_headers": ["Content-Type", "Authorization", "X-Request-ID"],
                "expose_headers": ["X-Request-ID"],
            }
        },
    )

    if app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            db.create_all()
