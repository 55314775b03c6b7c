"""
Magasin clé-valeur persistant pour les drapeaux applicatifs.

Stocké hors de la base relationnelle (fichier JSON) : il doit rester lisible
quelle que soit la base active. Ouvert au démarrage, écrit à chaque
modification, fermé à l'arrêt.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

BACKEND_MIGRATION_DONE = "backend_migration_done"
IS_LOGGED_IN = "is_logged_in"
LAST_LOGGED_IN_USER = "last_logged_in_user"


class SettingsStore:
    def __init__(self, path: str):
        self._path = Path(path)
        self._lock = threading.Lock()
        self._closed = False
        self._values: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            # Fichier illisible : on repart de valeurs vides plutôt que de bloquer le démarrage
            logger.warning("Paramètres illisibles (%s), valeurs par défaut utilisées : %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        with self._lock:
            value = self._values.get(key, default)
        return value

    def get_bool(self, key: str, default: bool = False) -> bool:
        with self._lock:
            value = self._values.get(key, default)
        return bool(value)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value
            self._write()

    def set_bool(self, key: str, value: bool) -> None:
        self.set(key, bool(value))

    def remove(self, key: str) -> None:
        with self._lock:
            if self._values.pop(key, None) is not None:
                self._write()

    def flush(self) -> None:
        with self._lock:
            self._write()

    def close(self) -> None:
        """Écrit une dernière fois puis ignore les écritures suivantes. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._write()
            self._closed = True

    def _write(self) -> None:
        if self._closed:
            logger.warning("Écriture ignorée : magasin de paramètres fermé (%s)", self._path)
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(self._values, fh, indent=2, sort_keys=True)
        os.replace(tmp_path, self._path)
