# Routes package init
"""
OrderDesk Backend - Route Handlers
==================================

Routes:
    POST /functions/v1/auth-login               (auth.py)
    POST /functions/v1/export-csv               (export.py)
    POST /functions/v1/send-confirmation-email  (notify.py)
    GET  /health                                (health.py)

Handlers stay thin: guards come from orderdesk.dependencies, payload checks
from orderdesk.validation, and the work from orderdesk.services. Errors are
raised and formatted by the global handlers in main.py.
"""

FUNCTIONS_PREFIX = "/functions/v1"
