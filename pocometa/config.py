"""Configuração da aplicação."""
import os
from dataclasses import dataclass


@dataclass
class AppConfig:
    """Configuração do gerador de metadata."""

    output_dir: str = ""  # empty = current directory
    encoding: str = "utf-8"
    indent: int = 2
    policy: str = ""  # "module:Class", empty = default policy
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Carrega config de variáveis de ambiente."""
        return cls(
            output_dir=os.getenv("POCOMETA_OUTPUT_DIR", ""),
            encoding=os.getenv("POCOMETA_ENCODING", "utf-8"),
            indent=int(os.getenv("POCOMETA_INDENT", "2")),
            policy=os.getenv("POCOMETA_POLICY", ""),
            log_level=os.getenv("POCOMETA_LOG_LEVEL", "WARNING").upper(),
        )


# Instância global
app_config = AppConfig.from_env()
