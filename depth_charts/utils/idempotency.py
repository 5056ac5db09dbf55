import hashlib
import inspect
import threading
from functools import wraps

from fastapi import HTTPException, Request
from starlette.concurrency import run_in_threadpool

# Simple in-memory store (per-process). Fine for dev/tests.
_idempotency_store = {}
_store_lock = threading.Lock()


async def _request_fingerprint(request: Request) -> str:
    """
    Build a stable fingerprint for this request using:
      - HTTP method
      - URL path
      - Query string
      - SHA-1 of the raw body (if any)
    Starlette caches request.body(), so reading it here is safe.
    """
    method = request.method.upper()
    path = request.url.path
    query = request.url.query or ""
    body_bytes = await request.body()
    body_hash = hashlib.sha1(body_bytes or b"").hexdigest()
    return f"{method}|{path}|{query}|{body_hash}"


def with_idempotency(key_prefix: str):
    """
    Decorator for FastAPI endpoints that create things.

    When the caller sends an 'Idempotency-Key' header, the first successful
    result for that key + request fingerprint (method+path+query+body) and
    caller is cached, and repeats return it without running the endpoint
    again. Without the header every call runs normally. Failed calls are never
    cached, so a retry after an error runs for real.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request: Request | None = kwargs.get("request")
            if request is None:
                request = next((a for a in args if isinstance(a, Request)), None)
            if request is None:
                raise HTTPException(status_code=500, detail="Request object not found")

            header_key = request.headers.get("Idempotency-Key")
            if not header_key:
                if inspect.iscoroutinefunction(func):
                    return await func(*args, **kwargs)
                return await run_in_threadpool(func, *args, **kwargs)

            fp = await _request_fingerprint(request)
            user = request.headers.get("X-User-Id") or ""
            cache_key = f"{key_prefix}::{user}::{header_key}::{fp}"

            with _store_lock:
                if cache_key in _idempotency_store:
                    return _idempotency_store[cache_key]

            if inspect.iscoroutinefunction(func):
                result = await func(*args, **kwargs)
            else:
                result = await run_in_threadpool(func, *args, **kwargs)

            with _store_lock:
                _idempotency_store.setdefault(cache_key, result)
                return _idempotency_store[cache_key]

        return wrapper

    return decorator
