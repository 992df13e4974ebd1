"""
LLM Prompt Manager
Reads and manages prompt templates from TOML/YAML configuration files
"""

from pathlib import Path
from typing import Any, Dict, Optional

import toml
import yaml

from core.logger import get_logger

logger = get_logger(__name__)


class PromptManager:
    """Prompt manager - one prompt file per language"""

    def __init__(self, config_path: Optional[str] = None, language: str = "en"):
        """
        Initialize Prompt manager

        Args:
            config_path: Configuration file path (optional)
            language: Language code
        """
        self.language = language

        if config_path is None:
            config_path = self._find_config_file(language)

        self.config_path = str(config_path)
        self.prompts: Dict[str, Any] = {}
        self.config: Dict[str, Any] = {}
        self._load_prompts()

    def _find_config_file(self, language: str = "en") -> str:
        """
        Find configuration file, trying multiple possible path locations
        Prefers prompts_<language>.toml, then a generic prompts.toml/yaml
        """
        search_paths = [
            # 1. Parent directory of current file /config
            Path(__file__).parent.parent / "config",
            # 2. Current working directory / ajos_backend/config
            Path.cwd() / "ajos_backend" / "config",
            # 3. Current working directory
            Path.cwd(),
        ]

        for base_path in search_paths:
            candidates = [
                base_path / f"prompts_{language}.toml",
                base_path / f"prompts_{language}.yaml",
                base_path / "prompts.toml",
                base_path / "prompts.yaml",
            ]
            for candidate in candidates:
                if candidate.exists():
                    logger.info(f"Found prompts config file: {candidate}")
                    return str(candidate)

        default_path = search_paths[0] / f"prompts_{language}.toml"
        logger.warning(
            f"Prompts config file not found, will use default path: {default_path}"
        )
        return str(default_path)

    def _load_prompts(self):
        """Load prompt configuration"""
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                if self.config_path.endswith(".toml"):
                    self.config = toml.load(f)
                else:
                    self.config = yaml.safe_load(f) or {}

            self.prompts = self.config.get("prompts", {})
            logger.info(f"Successfully loaded prompt configuration: {self.config_path}")

        except FileNotFoundError:
            logger.error(f"Prompt configuration file does not exist: {self.config_path}")
            self.prompts = {}
            self.config = {}
        except (yaml.YAMLError, toml.TomlDecodeError) as e:
            logger.error(f"Failed to parse prompt configuration file: {e}")
            self.prompts = {}
            self.config = {}

    def get_prompt(self, category: str, prompt_type: str, **kwargs) -> str:
        """
        Get prompt of specified type

        Args:
            category: Prompt category, dotted for nested tables (e.g.: insight_coach)
            prompt_type: Prompt type (e.g.: user_prompt_template)
            **kwargs: Parameters for formatting template

        Returns:
            Formatted prompt string, empty when the template is missing
        """
        category_config: Any = self.prompts
        for part in category.split("."):
            if isinstance(category_config, dict) and part in category_config:
                category_config = category_config[part]
            else:
                logger.warning(f"Prompt category not found: {category}")
                return ""

        if not isinstance(category_config, dict):
            logger.warning(f"Prompt category is not dictionary type: {category}")
            return ""

        prompt_template = category_config.get(prompt_type, "")
        if not prompt_template:
            logger.warning(f"Prompt not found: {category}.{prompt_type}")
            return ""

        if not kwargs:
            return prompt_template
        try:
            return prompt_template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Failed to format prompt, missing parameter: {e}")
            return prompt_template

    def get_user_prompt(
        self, category: str, prompt_type: str = "user_prompt_template", **kwargs
    ) -> str:
        """Get user prompt"""
        return self.get_prompt(category, prompt_type, **kwargs)

    def get_config_params(self, category: str) -> Dict[str, Any]:
        """
        Get generation parameters for a prompt category

        Category values override config.default_params
        """
        config_section = self.config.get("config", {})
        params = dict(config_section.get("default_params", {}))

        category_params = config_section.get(category)
        if isinstance(category_params, dict):
            params.update(category_params)
        return params


# Global prompt manager instance
_prompt_manager: Optional[PromptManager] = None


def get_prompt_manager(language: str = "en") -> PromptManager:
    """Get global prompt manager instance"""
    global _prompt_manager
    if _prompt_manager is None or _prompt_manager.language != language:
        _prompt_manager = PromptManager(language=language)
    return _prompt_manager
