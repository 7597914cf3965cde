from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from app.domain.entities.salon_config import SalonConfig


class SalonConfigPort(ABC):
    @abstractmethod
    def get_config(self) -> SalonConfig:
        """Current salon configuration."""
        raise NotImplementedError

    @abstractmethod
    def apply_override(self, fragment: dict[str, Any]) -> SalonConfig:
        """
        Shallow-merge `fragment` over the stored configuration and persist it.
        Raises SalonConfigError if the merged document is invalid.
        """
        raise NotImplementedError
