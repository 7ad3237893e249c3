"""
MedCamp Backend — Middleware Package
======================================

Middleware Chain:
    Request → [Request Context] → [GZip] → [CORS] → Route Handler

    RequestContextMiddleware runs first so every log line written while the
    request is handled, including the access line, carries its request ID.
"""
