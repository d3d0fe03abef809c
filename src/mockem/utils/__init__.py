"""
Utility helpers for inspecting generated data.
"""

from mockem.utils.quality import IntegrityReporter

__all__ = ["IntegrityReporter"]
