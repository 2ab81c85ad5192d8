"""
Prompt loader for the coaching generations.

Loads the task prompts from YAML configuration.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from chartcoach.domain.coaching.ports import PromptCatalog

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_SYSTEM_PROMPT = "You are a professional smart-money (ICT-style) trading coach."


class YamlPromptCatalog(PromptCatalog):
    """Load and render task prompts from YAML."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize prompt catalog.

        Args:
            config_path: Path to prompts.yaml file
        """
        if config_path is None:
            config_path = Path(__file__).parent / "prompts.yaml"

        self.config_path = config_path
        self.prompts = self._load_prompts()

    def _load_prompts(self) -> Dict[str, Any]:
        """Load prompts from YAML file, keeping only task entries."""
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
            logger.info(f"Loaded prompts from {self.config_path}")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load prompts: {e}")
            return {}
        return {k: v for k, v in loaded.items() if isinstance(v, dict)}

    def render(self, task: str, **values: object) -> tuple[str, str]:
        """
        Render the system and user prompts for a task.

        A template that cannot be formatted falls back to a plain listing
        of the values, so a broken catalogue degrades the answer rather
        than failing the request.

        Returns:
            (system_prompt, user_prompt)
        """
        entry = self.prompts.get(task, {})
        system_template = entry.get("system", DEFAULT_SYSTEM_PROMPT)
        user_template = entry.get("user_template", "")

        if not user_template:
            logger.warning(f"No user template for task '{task}'")
            return system_template, self._fallback_user_prompt(task, values)

        try:
            return system_template.format(**values), user_template.format(**values)
        except (KeyError, IndexError, ValueError) as e:
            logger.error(f"Failed to format prompt '{task}': {e}")
            return DEFAULT_SYSTEM_PROMPT, self._fallback_user_prompt(task, values)

    def temperature(self, task: str) -> float:
        value = self.prompts.get(task, {}).get("temperature", DEFAULT_TEMPERATURE)
        try:
            return float(value)
        except (TypeError, ValueError):
            return DEFAULT_TEMPERATURE

    @staticmethod
    def _fallback_user_prompt(task: str, values: Dict[str, object]) -> str:
        lines = [f"Task: {task.replace('_', ' ')}"]
        lines.extend(f"{key}: {value}" for key, value in values.items())
        return "\n".join(lines)


# Global prompt catalog instance
_prompt_catalog = None


def get_prompt_catalog() -> YamlPromptCatalog:
    """Get global prompt catalog instance."""
    global _prompt_catalog
    if _prompt_catalog is None:
        _prompt_catalog = YamlPromptCatalog()
    return _prompt_catalog
