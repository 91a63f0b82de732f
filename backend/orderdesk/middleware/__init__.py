# Middleware package init
"""
OrderDesk Backend - Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [CORS] → [Request ID] → [Logging] → Route Handler

    1. CORS: answers OPTIONS preflights directly and stamps the CORS headers
       on every response, including error responses
    2. Request ID: correlation id for logs, echoed as X-Request-ID
    3. Logging: one access-log line per request with status and duration
"""
