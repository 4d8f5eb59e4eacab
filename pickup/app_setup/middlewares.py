from fastapi import Request, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pickup.config import CORS_ORIGINS

"""
Middlewares transverses de l’application.
- register_basic_middlewares: CORS (front public, checkout Stripe côté client).
- register_security_middleware: en-têtes de sécurité sur toutes les réponses (API JSON).
"""
def register_basic_middlewares(app: FastAPI) -> None:
    """
    CORSMiddleware: autorise les origines définies (CORS_ORIGINS, '*' par défaut).
    - allow_credentials uniquement si les origines sont explicites ('*' l'interdit).
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials="*" not in CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)

        # En-têtes de sécurité
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        return response
