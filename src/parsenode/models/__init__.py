"""
Data model classes for parsenode.

Records are produced once per parse pass and never mutated; patch operations
are derived from them and consumed once by the applier.
"""

from parsenode.models.element import ElementRecord
from parsenode.models.patch import PatchOp

__all__ = [
    "ElementRecord",
    "PatchOp",
]
