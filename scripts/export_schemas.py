"""Export JSON schemas for the analysis, editing and creative result models."""

import json
from pathlib import Path

from pydantic import BaseModel

from manuscript.app.models import ChapterOutline, EditResult, NovelSkeleton
from manuscript.app.services.analysis import ANALYSES


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    models: list[type[BaseModel]] = [EditResult, NovelSkeleton, ChapterOutline]
    models.extend(spec.schema for spec in ANALYSES.values())

    for model in models:
        schema = model.model_json_schema(by_alias=True)
        path = schemas_dir / f"{model.__name__}.schema.json"
        with open(path, "w") as f:
            json.dump(schema, f, indent=2)
        print(f"Exported {model.__name__} schema to {path}")


if __name__ == "__main__":
    main()
