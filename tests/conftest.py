import hashlib
import hmac
import json
import os
import time
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

# Pas de Redis en tests: le lifespan désactive le rate limiting
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from pickup import config
from pickup.app import app as fastapi_app

WEBHOOK_SECRET = "whsec_test_secret"

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# Isolation: répertoire de données temporaire + aucun service externe configuré
@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    data_dir = tmp_path / "data"
    monkeypatch.setattr(config, "DATA_DIR", data_dir)
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", "sk_test_dummy")
    monkeypatch.setattr(config, "STRIPE_WEBHOOK_SECRET", WEBHOOK_SECRET)
    monkeypatch.setattr(config, "GOOGLE_MAPS_API_KEY", "")
    monkeypatch.setattr(config, "SMTP_USER", "")
    monkeypatch.setattr(config, "SMTP_PASS", "")
    monkeypatch.setattr(config, "ADMIN_EMAIL", "")
    return data_dir

@pytest.fixture
def data_dir(_isolated_config):
    return _isolated_config

def read_json(path) -> List[Dict[str, Any]]:
    if not path.exists():
        return []
    return json.loads(path.read_text(encoding="utf-8"))

@pytest.fixture
def bookings_file(data_dir):
    return data_dir / config.BOOKINGS_FILENAME

# Faux Stripe: PaymentIntent déterministe, appels enregistrés
@pytest.fixture
def fake_stripe(monkeypatch):
    calls: List[Dict[str, Any]] = []

    def _fake_create_payment_intent(*, amount_cents: int, booking_id: str):
        calls.append({"amount_cents": amount_cents, "booking_id": booking_id})
        return {"id": f"pi_{len(calls)}", "client_secret": f"pi_{len(calls)}_secret_test"}

    monkeypatch.setattr("pickup.payments.stripe_client.create_payment_intent", _fake_create_payment_intent)
    return calls

class FixedDistanceProvider:
    def __init__(self, miles: float):
        self.value = miles
        self.calls = []

    async def miles(self, origin: str, destination: str) -> float:
        self.calls.append((origin, destination))
        return self.value

@pytest.fixture
def fixed_distance(monkeypatch):
    """Factory: fixed_distance(5.0) remplace le provider de distance."""
    def _install(miles: float) -> FixedDistanceProvider:
        provider = FixedDistanceProvider(miles)
        monkeypatch.setattr("pickup.distance.providers.get_distance_provider", lambda: provider)
        return provider
    return _install

class FakeMailer:
    def __init__(self, fail_for: Optional[set] = None):
        self.sent: List[Dict[str, str]] = []
        self.fail_for = fail_for or set()

    def send(self, to_addr: str, subject: str, text: str) -> None:
        if to_addr in self.fail_for:
            raise OSError(f"SMTP refused {to_addr}")
        self.sent.append({"to": to_addr, "subject": subject, "text": text})

@pytest.fixture
def fake_mailer(monkeypatch):
    mailer = FakeMailer()
    monkeypatch.setattr(config, "SMTP_USER", "shop@example.com")
    monkeypatch.setattr(config, "ADMIN_EMAIL", "admin@example.com")
    monkeypatch.setattr("pickup.notifications.mailer.get_mailer", lambda: mailer)
    return mailer

def stripe_signature(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
    """En-tête Stripe-Signature valide (schéma v1: HMAC-SHA256 de 't.payload')."""
    ts = int(time.time()) if timestamp is None else timestamp
    signed = f"{ts}.{payload.decode('utf-8')}".encode("utf-8")
    sig = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={sig}"

def payment_succeeded_event(booking_id: Optional[str], event_id: str = "evt_1") -> Dict[str, Any]:
    metadata = {"bookingId": booking_id} if booking_id else {}
    return {
        "id": event_id,
        "object": "event",
        "type": "payment_intent.succeeded",
        "data": {"object": {"id": "pi_1", "object": "payment_intent", "metadata": metadata}},
    }

@pytest.fixture
def sign():
    return stripe_signature

@pytest.fixture
def make_event():
    return payment_succeeded_event

@pytest.fixture
def post_event(client, sign):
    """Poste un événement signé sur le webhook; retourne la réponse."""
    def _post(event: Dict[str, Any], signature: Optional[str] = None):
        body = json.dumps(event).encode("utf-8")
        headers = {"Content-Type": "application/json", "Stripe-Signature": signature or sign(body)}
        return client.post("/api/stripe/webhook", content=body, headers=headers)
    return _post

@pytest.fixture
def stored_bookings(bookings_file):
    """Relit bookings.json tel qu'écrit sur disque."""
    return lambda: read_json(bookings_file)
