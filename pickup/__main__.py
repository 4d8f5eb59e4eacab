"""
Point d'entrée principal pour le backend FastAPI.

Usage:
    python -m pickup

Ce mode lance uvicorn directement et lit quelques variables d'environnement:
- PORT: port d'écoute (par défaut 4000)
- UVICORN_RELOAD: active le reload auto en dev ("1"/"true"/"yes")
- LOG_LEVEL: niveau de logs uvicorn (ex: "info", "debug")
"""
import uvicorn
import os

from pickup.config import PORT

if __name__ == "__main__":
    # Activer le reload uniquement si explicitement demandé (ex: en local)
    reload_flag = os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes")
    log_level = os.environ.get("LOG_LEVEL", "info")
    uvicorn.run(
        "pickup.asgi:app",  # on réutilise l'ASGI app unique
        host="0.0.0.0",
        port=PORT,
        reload=reload_flag,
        # client.host = IP réelle uniquement pour les proxys listés (FORWARDED_ALLOW_IPS)
        proxy_headers=True,
        log_level=log_level
    )
