"""
Projection package: JSON documents to relational rows and their schema.

Pure, synchronous functions with no I/O; safe to call from any thread.
"""

from jsonsql.projection.flatten import flatten
from jsonsql.projection.schema import detect_type, infer_schema, merge_type

__all__ = [
    "detect_type",
    "flatten",
    "infer_schema",
    "merge_type",
]
