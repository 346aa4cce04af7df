"""Export JSON schemas for the analysis contract and the Document resource."""

import json
from pathlib import Path

from backend.app.models import AnalysisResultV1, Document


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    # Model output is validated against the alias (camelCase) shape
    analysis_path = schemas_dir / "AnalysisResultV1.schema.json"
    with open(analysis_path, "w") as f:
        json.dump(AnalysisResultV1.model_json_schema(by_alias=True), f, indent=2)
    print(f"Exported AnalysisResultV1 schema to {analysis_path}")

    document_path = schemas_dir / "Document.schema.json"
    with open(document_path, "w") as f:
        json.dump(Document.model_json_schema(), f, indent=2)
    print(f"Exported Document schema to {document_path}")


if __name__ == "__main__":
    main()
