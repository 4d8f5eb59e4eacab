"""
Registre central des routers.
- API: bookings (/api/bookings), webhook Stripe (/api/stripe/webhook)
- Health: /health
"""
from fastapi import FastAPI
from pickup.bookings import views as bookings_views
from pickup.payments import views as payments_views
from pickup.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # API
    app.include_router(bookings_views.router)
    app.include_router(payments_views.router)
    # Health & monitoring
    app.include_router(health_router)
