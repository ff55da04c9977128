"""
Firestore query helpers shared by the repositories.

Positional where() arguments still work with firebase_admin; the helper keeps
the call sites uniform should the keyword filter API become mandatory.
"""

from typing import Any, Dict, List

# Firestore limits the value list of "in" / "array_contains_any" filters
MAX_DISJUNCTION_VALUES = 30


def where_filter(query, field_path: str, op_string: str, value):
    """
    Apply a where() clause to a Firestore query or collection.

    Usage:
        query = where_filter(collection, "status", "==", "ASSIGNED")
        query = where_filter(query, "role", "array_contains_any", ["WASTE_MANAGEMENT"])
    """
    return query.where(field_path, op_string, value)


def chunked(values: List[Any], size: int = MAX_DISJUNCTION_VALUES) -> List[List[Any]]:
    return [values[i:i + size] for i in range(0, len(values), size)]


def sort_by_created_at(rows: List[Dict], descending: bool = True) -> List[Dict]:
    """Sort in memory to avoid composite indexes on every filtered query."""
    return sorted(
        rows,
        key=lambda row: (row.get("created_at") is not None, row.get("created_at")),
        reverse=descending,
    )
