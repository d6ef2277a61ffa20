"""Centralized prompt management loaded from YAML configuration.

All LLM prompts are defined in ``config/prompts/prompts.yaml`` and accessed
via ``PromptManager``.  Prompt wording can change without touching Python
code; the template variables a prompt expects are checked when it is
rendered.
"""

import logging
import string
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_DEFAULT_YAML_PATH = Path(__file__).resolve().parent.parent / "config" / "prompts" / "prompts.yaml"


@dataclass(frozen=True, slots=True)
class PromptTemplate:
    """A system prompt plus a ``str.format`` user template."""

    key: str
    system: str
    user: str

    @property
    def variables(self) -> frozenset[str]:
        """Placeholder names used by the user template."""
        return frozenset(
            field for _, field, _, _ in string.Formatter().parse(self.user) if field
        )

    def render(self, **values: Any) -> tuple[str, str]:
        """Return ``(system_prompt, user_prompt)``.

        Raises ``KeyError`` naming every placeholder missing from *values*.
        """
        missing = sorted(self.variables - values.keys())
        if missing:
            raise KeyError(f"Missing prompt variables for {self.key}: {', '.join(missing)}")
        return self.system, self.user.format(**values)


class PromptManager:
    """Load prompt templates from a YAML configuration file.

    Usage::

        pm = get_prompt_manager()
        system, user = pm.get("scene_segmentation", "chunk",
            start_number=1,
            overlap_chars=0,
            chunk_text="INT. KITCHEN - DAY ...",
        )
    """

    def __init__(self, yaml_path: Path | str | None = None) -> None:
        path = Path(yaml_path) if yaml_path else _DEFAULT_YAML_PATH
        if not path.exists():
            raise FileNotFoundError(f"Prompt YAML not found: {path}")
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        self._version = str(data.pop("version", "unknown"))
        self._templates: dict[str, dict[str, PromptTemplate]] = {}
        for section, entries in data.items():
            self._templates[section] = {
                name: PromptTemplate(
                    key=f"{section}.{name}",
                    system=entry["system"].strip(),
                    user=entry["user"].strip(),
                )
                for name, entry in (entries or {}).items()
            }
        logger.info("PromptManager loaded v%s from %s", self._version, path)

    @property
    def version(self) -> str:
        return self._version

    def template(self, section: str, name: str) -> PromptTemplate:
        """Raises ``KeyError`` if section/name does not exist."""
        try:
            return self._templates[section][name]
        except KeyError:
            raise KeyError(f"Prompt not found: {section}.{name}")

    def get(self, section: str, name: str, **kwargs: Any) -> tuple[str, str]:
        """Return ``(system_prompt, user_prompt)`` with variables substituted."""
        return self.template(section, name).render(**kwargs)

    def sections(self) -> list[str]:
        """List available top-level sections."""
        return list(self._templates)


@lru_cache
def get_prompt_manager(yaml_path: str | None = None) -> PromptManager:
    """Return a cached ``PromptManager`` per YAML path."""
    return PromptManager(yaml_path)
