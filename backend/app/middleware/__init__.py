# Middleware package init
"""
StarPrep Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Identity] → [CORS] → Route Handler

    Why this order:
    1. Request ID: Generate correlation ID for logging and tracing
    2. Logging: Log request details with the generated request ID,
       including requests the identity check rejects
    3. Identity: Attach the caller identity from the bearer token (if any)
    4. CORS: Applied by FastAPI's CORSMiddleware (handles preflight)
"""
