"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager importe `pickup.asgi:app` (ex: uvicorn pickup.asgi:app).
- Toute la configuration FastAPI (routes, middlewares, lifespan) est centralisée dans pickup.app.
"""

from pickup.app import app
