"""
StudyHub Backend — Middleware Package
======================================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → [Unhandled Error] → Route Handler

    Request ID runs first so the access log line and any error handler can
    read the id from request_id_var.
"""
