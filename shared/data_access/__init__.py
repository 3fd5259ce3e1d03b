"""
Data access layer for document store operations.
"""
from .document_path import split_path, join_path, validate_path
from .document_store import (
    DocumentStore,
    InMemoryDocumentStore,
    SERVER_TIMESTAMP,
    ServerTimestamp,
)
from .dynamodb_document_store import DynamoDBDocumentStore
from .exceptions import (
    DocumentStoreError,
    DocumentNotFoundError,
    InvalidPathError,
    RetryableError,
    StoreTimeoutError,
)

__all__ = [
    'split_path',
    'join_path',
    'validate_path',
    'DocumentStore',
    'InMemoryDocumentStore',
    'DynamoDBDocumentStore',
    'SERVER_TIMESTAMP',
    'ServerTimestamp',
    'DocumentStoreError',
    'DocumentNotFoundError',
    'InvalidPathError',
    'RetryableError',
    'StoreTimeoutError',
]
