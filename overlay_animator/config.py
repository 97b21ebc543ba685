from __future__ import annotations

from typing import Optional

import yaml
from pydantic import BaseModel


class AppConfig(BaseModel):
    document: Optional[str] = None
    widget_id: Optional[str] = None
    fps: Optional[int] = None
    output: Optional[str] = None
    precision: Optional[int] = None


def load_config(path: str) -> AppConfig:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return AppConfig(**data)
