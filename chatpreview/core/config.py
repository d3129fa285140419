"""
Process-wide settings for chatpreview

Values come from ``CHATPREVIEW_*`` environment variables or a ``.env`` file;
the rule table optionally comes from a YAML file with a top-level ``rules``
list.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ScalePolicy
from .url_matcher import MatchRule, build_rules, default_rules


class PreviewSettings(BaseSettings):
    """Operator configuration"""

    model_config = SettingsConfigDict(
        env_prefix="CHATPREVIEW_",
        env_file=".env",
        extra="ignore",
    )

    images_path: Path = Path(".chatpreview/images")
    fixed_size: int = 0
    rescale_to_viewport: bool = True
    resize_animated: bool = True
    animation_seconds: int = Field(default=10, gt=0)
    request_timeout: int = Field(default=30, gt=0)
    max_workers: int = Field(default=4, gt=0)
    transcoder_command: str = "convert"
    rules_file: Optional[Path] = None

    def scale_policy(self) -> ScalePolicy:
        return ScalePolicy(
            fixed_size=self.fixed_size,
            rescale_to_viewport=self.rescale_to_viewport,
            resize_animated=self.resize_animated,
            animation_seconds=self.animation_seconds,
        )

    def load_rules(self) -> List[MatchRule]:
        if self.rules_file is None:
            return default_rules()
        return load_rules_file(self.rules_file)


def load_rules_file(path: Path) -> List[MatchRule]:
    """
    Load a rule table from YAML

    Args:
        path: File with a top-level ``rules`` list

    Returns:
        Compiled rules in file order

    Raises:
        FileNotFoundError: If the file is missing
        ValueError: If the file does not describe a rule list
    """
    rules_path = Path(path).expanduser()
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules file not found: {rules_path}")

    with rules_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    raw_rules = data.get("rules") if isinstance(data, dict) else None
    if not isinstance(raw_rules, list):
        raise ValueError(f"{rules_path} must contain a 'rules' list")
    return build_rules(raw_rules)
