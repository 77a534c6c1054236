# config/settings.py
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
import os
from dotenv import load_dotenv

load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Configuración incompleta o inválida; aborta antes de conectar."""


def _env(name: str, default: str = "") -> Any:
    # Se lee al instanciar (no al importar) para poder sobreescribir en tests
    return field(default_factory=lambda: os.getenv(name, default))


@dataclass(frozen=True)
class Settings:
    # IMAP
    IMAP_HOST: str = _env("IMAP_HOST")
    IMAP_USER: str = _env("IMAP_USER")
    IMAP_PASS: str = _env("IMAP_PASS")
    # Texto tal cual del entorno; validate() los comprueba, port()/use_ssl() los convierten
    IMAP_PORT_RAW: str = _env("IMAP_PORT", "993")
    IMAP_SSL_RAW: str = _env("IMAP_SSL", "true")

    # Salida
    OUTPUT_DIR: str = _env("OUTPUT_DIR", "./output")
    LOG_LEVEL: str = _env("LOG_LEVEL", "INFO")

    # ───────── helpers ─────────
    def port(self) -> int:
        raw = (self.IMAP_PORT_RAW or "").strip()
        return int(raw) if raw else 993

    def use_ssl(self) -> bool:
        return (self.IMAP_SSL_RAW or "").strip().lower() == "true"

    def output_path(self) -> Path:
        return Path(self.OUTPUT_DIR or "./output").resolve()

    def log_level(self) -> str:
        level = (self.LOG_LEVEL or "INFO").strip().upper()
        return level if level in LOG_LEVELS else "INFO"

    def validate(self) -> None:
        missing = [
            name for name in ("IMAP_HOST", "IMAP_USER", "IMAP_PASS")
            if not (getattr(self, name) or "").strip()
        ]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")
        try:
            self.port()
        except ValueError:
            raise ConfigError("IMAP_PORT must be a valid number") from None
        level = (self.LOG_LEVEL or "INFO").strip().upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}")
