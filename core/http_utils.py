from functools import wraps
import time as time_module

from flask import make_response


def _set_no_store_headers(resp):
    resp.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    resp.headers["Pragma"] = "no-cache"
    resp.headers["Expires"] = "0"
    return resp


def no_store(body, status=200):
    return _set_no_store_headers(make_response(body, status))


def nocache(view):
    @wraps(view)
    def _wrapped(*args, **kwargs):
        rv = view(*args, **kwargs)
        if isinstance(rv, tuple):
            data, status, headers = (rv + (None, None))[0:3]
            resp = make_response(data, status, headers)
        else:
            resp = make_response(rv)
        return _set_no_store_headers(resp)

    return _wrapped


def elapsed_ms(start_t: float) -> int:
    return int((time_module.perf_counter() - start_t) * 1000)
