from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class MessageTemplate(BaseModel):
    """One chat reply. `params` lists the placeholders the caller must supply."""
    name: str
    template: str
    description: str = ""
    params: list[str] = Field(default_factory=list)


class MessageStore(ABC):
    """Abstract interface for chat reply templates.

    Templates are grouped by category (the YAML filename) and name, so
    `get("order", "confirmation")` reads the `confirmation` entry of
    `order.yaml`. Each language lives in its own folder; a template missing
    from the current language is looked up in the fallback language.
    """

    @property
    @abstractmethod
    def language(self) -> str:
        """Reply language code (ISO 639-1, e.g. 'id', 'en')."""
        ...

    @property
    @abstractmethod
    def fallback_language(self) -> str:
        ...

    @abstractmethod
    def get(self, category: str, name: str) -> MessageTemplate | None:
        """Look up a reply. None if it exists in neither language."""
        ...

    @abstractmethod
    def list_categories(self) -> list[str]:
        ...

    @staticmethod
    def render(template: MessageTemplate, values: dict[str, Any]) -> str:
        """Fill in a reply.

        Raises:
            ValueError: If a declared placeholder has no value.
        """
        missing = sorted(set(template.params) - set(values))
        if missing:
            raise ValueError(f"Missing required parameters for reply '{template.name}': {missing}")
        return template.template.format(**values)

    def get_and_render(self, category: str, name: str, values: dict[str, Any] | None = None) -> str:
        template = self.get(category, name)
        if template is None:
            raise ValueError(f"Message template '{category}/{name}' not found")
        return self.render(template, values or {})
