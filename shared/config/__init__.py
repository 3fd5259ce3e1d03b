"""
Configuration module for shared collection and table names.
"""

from .table_names import (
    VIDEO_SESSIONS_COLLECTION,
    DOCUMENTS_TABLE_NAME,
    get_table_name
)

__all__ = [
    'VIDEO_SESSIONS_COLLECTION',
    'DOCUMENTS_TABLE_NAME',
    'get_table_name'
]
