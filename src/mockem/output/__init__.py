"""
Output module for serializing generated data.

Supports:
- CSV text with MockEm comment header
- Multi-schema bundles (CSV files + manifest.json, base64 wrapped)
- Writing CSV files and manifest to a directory
"""

from mockem.output.writer import (
    ExportPayload,
    ExportWriter,
    decode_bundle,
    encode_bundle,
    to_csv,
)

__all__ = [
    "ExportPayload",
    "ExportWriter",
    "decode_bundle",
    "encode_bundle",
    "to_csv",
]
