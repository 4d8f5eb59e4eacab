"""
Adaptateur distance: calcule la distance routière (miles) origine -> adresse client.
- NullDistanceProvider: aucune clé configurée, renvoie toujours 0 (tarif de base).
- GoogleDistanceMatrixProvider: un appel Distance Matrix (httpx), premier trajet.
- get_distance_provider(): choisit l'implémentation selon la configuration.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from pickup import config

logger = logging.getLogger(__name__)

DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
METERS_PER_MILE = 1609.34
_HTTPX_TIMEOUT = httpx.Timeout(10.0)

class DistanceProvider:
    """Contrat commun: miles(origin, destination) -> float >= 0."""

    async def miles(self, origin: str, destination: str) -> float:
        raise NotImplementedError

class NullDistanceProvider(DistanceProvider):
    async def miles(self, origin: str, destination: str) -> float:
        return 0.0

def extract_meters(payload: Any) -> float:
    """
    Extrait rows[0].elements[0].distance.value (mètres) d'une réponse Distance Matrix.
    - Tolérant: 0.0 si un champ manque ou n'est pas numérique.
    """
    try:
        value = payload["rows"][0]["elements"][0]["distance"]["value"]
        meters = float(value)
    except (KeyError, IndexError, TypeError, ValueError):
        return 0.0
    return meters if meters > 0 else 0.0

class GoogleDistanceMatrixProvider(DistanceProvider):
    """
    Distance via l'API Google Distance Matrix.
    - Les erreurs réseau (httpx.HTTPError) remontent à l'appelant.
    - Une réponse mal formée (JSON invalide, champ absent, statut ZERO_RESULTS...) donne 0.
    - transport: injectable (httpx.MockTransport en tests).
    """

    def __init__(self, api_key: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.transport = transport

    async def miles(self, origin: str, destination: str) -> float:
        params: Dict[str, str] = {
            "origins": origin,
            "destinations": destination,
            "units": "imperial",
            "key": self.api_key,
        }
        async with httpx.AsyncClient(timeout=_HTTPX_TIMEOUT, transport=self.transport) as client:
            resp = await client.get(DISTANCE_MATRIX_URL, params=params)
        try:
            payload = resp.json()
        except ValueError:
            logger.warning("distance.google invalid JSON status=%s", resp.status_code)
            return 0.0
        meters = extract_meters(payload)
        if not meters:
            logger.warning(
                "distance.google no distance status=%s api_status=%s",
                resp.status_code,
                payload.get("status") if isinstance(payload, dict) else None,
            )
        return meters / METERS_PER_MILE

def get_distance_provider() -> DistanceProvider:
    """Google si GOOGLE_MAPS_API_KEY est défini, sinon le provider nul."""
    if config.GOOGLE_MAPS_API_KEY:
        return GoogleDistanceMatrixProvider(config.GOOGLE_MAPS_API_KEY)
    return NullDistanceProvider()
