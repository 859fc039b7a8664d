def init_security_headers(app):

    @app.after_request
    def add_security_headers(resp):
        # JSON API 전용: HTML/스크립트 로딩 없음
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Content-Security-Policy", "default-src 'none'; frame-ancestors 'none'")
        if app.config.get("ENV") not in ("development", "testing"):
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=15552000; includeSubDomains; preload"
            )
        return resp
