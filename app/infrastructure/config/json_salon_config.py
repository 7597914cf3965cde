from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from app.application.dto.salon_config import SalonConfigDTO
from app.application.exceptions import PersistenceError, SalonConfigError
from app.application.ports.salon_config import SalonConfigPort
from app.domain.entities.salon_config import SalonConfig


class JsonSalonConfigStore(SalonConfigPort):
    def __init__(self, path: str = "./config/salon.json") -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)
        self._document = self._read_document()
        self._config = _validate(self._document)
        self._logger.info(
            "Salon config loaded",
            extra={"path": str(self._path), "services": len(self._config.services), "staff": len(self._config.staff)},
        )

    def _read_document(self) -> dict[str, Any]:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise SalonConfigError(f"Salon config not found: {self._path}") from e
        except json.JSONDecodeError as e:
            raise SalonConfigError(f"Salon config is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise SalonConfigError("Salon config must be a JSON object")
        return data

    def _write_document(self, document: dict[str, Any]) -> None:
        temp_path = self._path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Could not write {self._path}: {e}") from e

    def get_config(self) -> SalonConfig:
        with self._lock:
            return self._config

    def apply_override(self, fragment: dict[str, Any]) -> SalonConfig:
        with self._lock:
            merged = {**self._document, **fragment}
            config = _validate(merged)
            self._write_document(merged)
            self._document = merged
            self._config = config
            self._logger.info("Salon config overridden", extra={"keys": ",".join(sorted(fragment))})
            return config


def _validate(document: dict[str, Any]) -> SalonConfig:
    try:
        return SalonConfigDTO.model_validate(document).to_entity()
    except ValidationError as e:
        raise SalonConfigError(f"Invalid salon config: {e}") from e
