from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError


class AppConfig(BaseModel):
    state_dir: Path = Field(default=Path(".second_brain"))
    openai_model: str = Field(default="gpt-4o-mini")
    categorize_max_tokens: int = Field(default=100, ge=1)
    answer_max_tokens: int = Field(default=1000, ge=1)
    top_k: int = Field(default=3, ge=1)
    min_chunk_chars: int = Field(default=50, ge=0)
    preview_chars: int = Field(default=500, ge=1)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="WARNING")

    @property
    def state_dir_resolved(self) -> Path:
        return self.state_dir.resolve()


def load_config(path: Optional[Path] = None) -> AppConfig:
    """
    Load configuration from a YAML file.

    If `path` is None, looks for `config.yaml` in the current working directory.
    Also loads environment variables from a `.env` file if present.
    """
    load_dotenv()

    if path is None:
        path = Path("config.yaml")

    if path.exists():
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        try:
            cfg = AppConfig(**raw)
        except ValidationError as e:
            raise SystemExit(f"Invalid configuration in {path}:\n{e}") from e
    else:
        # Fall back to defaults if no config file is present.
        cfg = AppConfig()

    cfg.state_dir_resolved.mkdir(parents=True, exist_ok=True)
    return cfg


__all__ = ["AppConfig", "load_config"]
