# module pickup.app
from fastapi import FastAPI

from pickup.app_setup.lifespan import lifespan
from pickup.app_setup.middlewares import register_basic_middlewares, register_security_middleware
from pickup.app_setup.exceptions import register_exception_handlers
from pickup.app_setup.routers import register_routers

def create_app() -> FastAPI:
    """
    Crée et configure l’instance FastAPI de l’application.
    Étapes:
      1) register_basic_middlewares: CORS.
      2) register_security_middleware: en-têtes de sécurité.
      3) register_exception_handlers: JSON {"detail"} + 500 générique journalisé.
      4) register_routers: bookings, webhook Stripe, health.
    Retourne:
      - FastAPI: l’application prête à être servie (ASGI).
    """
    app = FastAPI(title="I TURN IN API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    return app

# App globale
app = create_app()
