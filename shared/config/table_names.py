"""
Collection and table name constants.

This module provides centralized collection and table names to ensure
consistency between the call quality monitor, the offline sync queue and
the DynamoDB-backed document store.
"""

import os

# Document store collections
VIDEO_SESSIONS_COLLECTION = 'videoSessions'

# DynamoDB table holding every document, keyed by document path
DOCUMENTS_TABLE_NAME = 'Documents'

# Table name mapping for environment variable overrides
TABLE_NAME_ENV_VARS = {
    'VIDEO_SESSIONS_COLLECTION': VIDEO_SESSIONS_COLLECTION,
    'DOCUMENTS_TABLE_NAME': DOCUMENTS_TABLE_NAME,
}


def get_table_name(table_key: str, default: str = None) -> str:
    """
    Get collection or table name from environment variable or use default.
    
    Allows names to be overridden per deployment environment (dev, staging,
    prod) while providing sensible defaults.
    
    Supports both the full key (e.g. 'DOCUMENTS_TABLE_NAME') and the short
    form without the '_NAME' suffix (e.g. 'DOCUMENTS_TABLE').
    
    Args:
        table_key: Environment variable key (e.g., 'DOCUMENTS_TABLE_NAME')
        default: Default name if environment variable not set
    
    Returns:
        Name from environment or default
    
    Example:
        >>> os.environ['DOCUMENTS_TABLE_NAME'] = 'Documents-Dev'
        >>> get_table_name('DOCUMENTS_TABLE_NAME')
        'Documents-Dev'
    """
    if default is None:
        default = TABLE_NAME_ENV_VARS.get(table_key, '')
    
    value = os.getenv(table_key)
    if value:
        return value
    
    if table_key.endswith('_TABLE_NAME'):
        value = os.getenv(table_key[:-len('_NAME')])
        if value:
            return value
    
    return default
