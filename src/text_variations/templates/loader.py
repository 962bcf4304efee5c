from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel

from text_variations.models.operation import Operation


class PromptCatalog(BaseModel):
    name: str
    operations: dict[Operation, str]
    ranking: str


TEMPLATES_DIR = Path(__file__).parent


def load_catalog(path: str | Path | None = None) -> PromptCatalog:
    """Load a prompt catalog from YAML, defaulting to the bundled one."""
    path = Path(path) if path is not None else TEMPLATES_DIR / "prompts.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Prompt catalog not found: {path}")
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return PromptCatalog(**data)


@lru_cache(maxsize=1)
def default_catalog() -> PromptCatalog:
    return load_catalog()
