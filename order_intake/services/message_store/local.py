from pathlib import Path

import yaml

from order_intake.services.message_store.base import MessageStore, MessageTemplate


class LocalMessageStore(MessageStore):
    """Loads reply templates from YAML files, one folder per language.

    Directory structure:
        templates/
        ├── id/
        │   ├── order.yaml       # category: "order"
        │   └── payment.yaml     # category: "payment"
        └── en/
            └── ...

    Each top-level key of a file is a template name:
        confirmation:
            template: |
                {summary}
                Apakah pesanan ini sudah benar?
            params:
                - summary
    """

    def __init__(self, templates_dir: str | Path, language: str = "id", fallback_language: str = "id"):
        self._base_dir = Path(templates_dir)
        self._language = language
        self._fallback_language = fallback_language
        self._cache: dict[str, dict] = {}

        if not self._base_dir.exists():
            raise FileNotFoundError(f"Templates directory not found: {self._base_dir}")

    @property
    def language(self) -> str:
        return self._language

    @property
    def fallback_language(self) -> str:
        return self._fallback_language

    def get(self, category: str, name: str) -> MessageTemplate | None:
        for lang in (self._language, self._fallback_language):
            data = self._load_category(category, lang)
            if data and name in data:
                entry = data[name]
                return MessageTemplate(
                    name=f"{category}.{name}",
                    template=entry["template"],
                    description=entry.get("description", ""),
                    params=entry.get("params", []),
                )
        return None

    def list_categories(self) -> list[str]:
        categories = set()
        for lang in (self._language, self._fallback_language):
            lang_dir = self._base_dir / lang
            if lang_dir.exists():
                categories.update(path.stem for path in lang_dir.glob("*.yaml"))
        return sorted(categories)

    def _load_category(self, category: str, lang: str) -> dict | None:
        cache_key = f"{lang}/{category}"
        if cache_key not in self._cache:
            path = self._base_dir / lang / f"{category}.yaml"
            if not path.exists():
                return None
            with open(path, encoding="utf-8") as f:
                self._cache[cache_key] = yaml.safe_load(f) or {}
        return self._cache[cache_key]
