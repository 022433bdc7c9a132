"""Gateway router package.

Import the composed router via:

    from services.gateway.app.routes import router

The composition lives in `services/gateway/app/routes/api_router.py`.
"""

from .api_router import router
