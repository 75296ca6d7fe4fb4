# Middleware package init
"""
HISS Backend — Middleware Package
==================================

Middleware Chain:
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

    The request ID is assigned first so the access log line and any error
    body of the same request carry it.
"""
