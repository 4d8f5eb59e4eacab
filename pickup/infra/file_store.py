"""
Stockage JSON sur disque (un fichier = une collection).
- Lecture/écriture du fichier entier, comme attendu par le front (tableau JSON).
- Écriture atomique: fichier temporaire dans le même répertoire puis os.replace.
- Un verrou par chemin sérialise les cycles lecture-modification-écriture du process.
"""
import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List

logger = logging.getLogger(__name__)

# Verrous partagés entre instances pointant sur le même fichier
_LOCKS: Dict[str, threading.RLock] = {}
_LOCKS_GUARD = threading.Lock()

def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _LOCKS_GUARD:
        lock = _LOCKS.get(key)
        if lock is None:
            lock = _LOCKS[key] = threading.RLock()
        return lock

class JsonFileStore:
    """
    Collection JSON (tableau) persistée dans un seul fichier.
    - ensure(): crée le répertoire et le fichier ([]) si absents.
    - read(): relit le fichier entier.
    - write(data): réécrit le fichier entier de manière atomique.
    - transaction(): verrou + lecture, puis écriture si le bloc modifie la collection sans erreur.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    def ensure(self) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self._write_unlocked([])
                logger.info("file_store created path=%s", self.path)

    def read(self) -> List[Dict[str, Any]]:
        with self._lock:
            if not self.path.exists():
                return []
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        if not isinstance(data, list):
            raise ValueError(f"{self.path} ne contient pas un tableau JSON")
        return data

    def write(self, data: List[Dict[str, Any]]) -> None:
        with self._lock:
            self._write_unlocked(data)

    @contextmanager
    def transaction(self) -> Iterator[List[Dict[str, Any]]]:
        with self._lock:
            data = self.read()
            original = copy.deepcopy(data)
            yield data
            # Rien à réécrire si le bloc n'a rien modifié
            if data != original:
                self._write_unlocked(data)

    def _write_unlocked(self, data: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            # Ne jamais laisser traîner un fichier temporaire partiel
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
