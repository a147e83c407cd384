"""
Prompt Cache

In-memory cache for system prompt files.
Reads prompts from disk on first access, caches in memory.
"""
import logging
from pathlib import Path
from string import Template

logger = logging.getLogger("expocrm.services.prompt_cache")


class PromptCache:
    """
    Cache for system prompts stored as text files (<name>.txt).

    Prompt files may contain $placeholders, filled by render().
    """

    def __init__(self, prompts_dir: str):
        self._cache: dict[str, str] = {}
        self._prompts_dir = Path(prompts_dir)

    def get_prompt(self, name: str) -> str:
        """
        Get prompt text by name.

        Raises:
            FileNotFoundError: If no prompt file exists for the name
        """
        if name not in self._cache:
            path = self._prompts_dir / f"{name}.txt"
            self._cache[name] = path.read_text(encoding="utf-8").strip()
            logger.info(f"Loaded prompt from file: {path.name}")
        return self._cache[name]

    def render(self, name: str, **values) -> str:
        """Prompt with $placeholders substituted (unknown placeholders are left as is)"""
        return Template(self.get_prompt(name)).safe_substitute(
            {key: "" if value is None else str(value) for key, value in values.items()}
        )

