"""
Export Writer - turns generated rows into CSV text or a multi-file bundle.

Output:
- Single schema: one CSV document
- Several schemas: base64-wrapped plain-text bundle holding one CSV per
  schema plus a manifest.json (not a real ZIP archive)
"""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from mockem.models import GenerationResult, Row

logger = logging.getLogger(__name__)

CSV_HEADER_LINES = (
    "# Powered by MockEm - Enterprise Mock Data Generator",
    "# All data is purely fictional and generated for testing purposes",
)

BUNDLE_MAGIC = "MOCKEM-BUNDLE/1"
MANIFEST_NAME = "manifest.json"


def _format_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def to_csv(rows: Sequence[Row], generated_at: Optional[datetime] = None) -> str:
    """
    Render rows as CSV text preceded by '#' comment lines and a blank line.

    Fields with commas, quotes or newlines are quoted with quotes doubled;
    dates are ISO-8601; None renders as an empty field.
    """
    if not rows:
        return ""

    generated_at = generated_at or datetime.now(timezone.utc)
    header = "\n".join(CSV_HEADER_LINES + (f"# Generated on: {generated_at.isoformat()}",))

    columns = list(rows[0].keys())
    df = pd.DataFrame(
        [[_format_value(row.get(col)) for col in columns] for row in rows],
        columns=columns,
        dtype=object,
    )
    body = df.to_csv(index=False, na_rep="", lineterminator="\n").rstrip("\n")

    return f"{header}\n\n{body}"


def encode_bundle(files: Dict[str, str]) -> str:
    """Concatenate named text files into a length-prefixed bundle, base64 encoded."""
    parts = [BUNDLE_MAGIC]
    for name, content in files.items():
        parts.append(f"--- FILE: {name} LENGTH={len(content)} ---")
        parts.append(content)
    return base64.b64encode("\n".join(parts).encode("utf-8")).decode("ascii")


def decode_bundle(zip_data: str) -> Dict[str, str]:
    """Parse a bundle produced by encode_bundle back into {filename: text}."""
    text = base64.b64decode(zip_data).decode("utf-8")
    if not text.startswith(BUNDLE_MAGIC + "\n"):
        raise ValueError("Not a mockem bundle")

    files: Dict[str, str] = {}
    pos = len(BUNDLE_MAGIC) + 1
    prefix = "--- FILE: "
    while pos < len(text):
        line_end = text.index("\n", pos)
        line = text[pos:line_end]
        if not line.startswith(prefix) or not line.endswith(" ---"):
            raise ValueError(f"Malformed bundle entry header: {line!r}")

        name, _, length = line[len(prefix):-len(" ---")].rpartition(" LENGTH=")
        start = line_end + 1
        end = start + int(length)
        files[name] = text[start:end]
        # Skip the separator newline between entries
        pos = end + 1

    return files


@dataclass
class ExportPayload:
    """What /export returns: exactly one of csv_data or zip_data is set."""
    filename: str
    csv_data: Optional[str] = None
    zip_data: Optional[str] = None

    @property
    def is_bundle(self) -> bool:
        return self.zip_data is not None

    def to_dict(self) -> Dict[str, str]:
        if self.is_bundle:
            return {"zipData": self.zip_data, "filename": self.filename}
        return {"csvData": self.csv_data, "filename": self.filename}


class ExportWriter:
    """
    Serializes a GenerationResult for download or to disk.

    Output Structure (write_files):
        <output_dir>/
        ├── companies.csv
        ├── contacts.csv
        └── manifest.json
    """

    def __init__(self, result: GenerationResult):
        self.result = result

    def _stamp(self) -> str:
        return self.result.generated_at.date().isoformat()

    def csv_files(self) -> Dict[str, str]:
        """One CSV document per schema, keyed by `<schema>.csv`."""
        return {
            f"{schema}.csv": to_csv(rows, self.result.generated_at)
            for schema, rows in self.result.data.items()
        }

    def manifest(self) -> Dict[str, Any]:
        """Describe the bundle contents."""
        files: List[str] = [f"{schema}.csv" for schema in self.result.schemas]
        return {
            "generator": "MockEm",
            "generated_at": self.result.generated_at.isoformat(),
            "category": self.result.category,
            "platform": self.result.platform,
            "seed": self.result.seed,
            "schemas": self.result.schemas,
            "generation_order": self.result.order,
            "total_rows": self.result.total_rows,
            "files": files,
            "tables": {
                schema: {
                    "rows": len(rows),
                    "columns": self.result.columns(schema),
                    "unresolved_references": self.result.unresolved_references.get(schema, []),
                }
                for schema, rows in self.result.data.items()
            },
            "disclaimer": "All data is purely fictional and generated for testing purposes",
        }

    def export(self) -> ExportPayload:
        """CSV text for one schema, base64 bundle for several."""
        schemas = self.result.schemas
        prefix = f"mockem_{self.result.category}_{self.result.platform}"

        if len(schemas) == 1:
            schema = schemas[0]
            return ExportPayload(
                filename=f"{prefix}_{schema}_{self._stamp()}.csv",
                csv_data=to_csv(self.result.data[schema], self.result.generated_at),
            )

        files = self.csv_files()
        files[MANIFEST_NAME] = json.dumps(self.manifest(), indent=2)
        logger.info(f"Bundled {len(files)} files for {', '.join(schemas)}")

        return ExportPayload(
            filename=f"{prefix}_{self._stamp()}.zip",
            zip_data=encode_bundle(files),
        )

    def write_files(self, output_dir: Path) -> Dict[str, Path]:
        """Write each schema's CSV plus manifest.json into `output_dir`."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        output_paths: Dict[str, Path] = {}
        for name, content in self.csv_files().items():
            path = output_dir / name
            path.write_text(content + "\n")
            output_paths[name] = path
            logger.info(f"Wrote {path}")

        manifest_path = output_dir / MANIFEST_NAME
        with open(manifest_path, "w") as f:
            json.dump(self.manifest(), f, indent=2, default=str)
        output_paths[MANIFEST_NAME] = manifest_path

        logger.info(f"Wrote manifest to {manifest_path}")
        return output_paths
