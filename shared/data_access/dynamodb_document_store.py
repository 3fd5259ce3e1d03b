"""
DynamoDB-backed document store.

Every document lives in a single table keyed by its full path
('collection/docId'); document fields are stored as top-level item
attributes. Blocking boto3 calls run in the default executor so the
store can be awaited from the event loop.
"""

import asyncio
import functools
import logging
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from shared.config.table_names import get_table_name
from .document_path import validate_path
from .document_store import ServerTimestamp
from .exceptions import (
    DocumentStoreError,
    DocumentNotFoundError,
    RetryableError,
)

logger = logging.getLogger(__name__)

PATH_ATTRIBUTE = 'documentPath'

RETRYABLE_ERROR_CODES = [
    'ProvisionedThroughputExceededException',
    'ThrottlingException',
    'RequestLimitExceeded',
    'InternalServerError',
    'ServiceUnavailable',
]


def to_dynamodb_value(value: Any, now: datetime) -> Any:
    """
    Convert a Python value to a DynamoDB-compatible value.

    Floats become Decimal, datetimes and SERVER_TIMESTAMP become ISO-8601
    strings, enums are stored by value.
    """
    if isinstance(value, ServerTimestamp):
        return now.isoformat()
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {key: to_dynamodb_value(item, now) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamodb_value(item, now) for item in value]
    return value


def from_dynamodb_value(value: Any) -> Any:
    """Convert a value read from DynamoDB back to plain Python types."""
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, dict):
        return {key: from_dynamodb_value(item) for key, item in value.items()}
    if isinstance(value, (list, set, tuple)):
        return [from_dynamodb_value(item) for item in value]
    return value


class DynamoDBDocumentStore:
    """
    DocumentStore implementation on top of a DynamoDB table.

    The table must have a string partition key named 'documentPath'.
    """

    def __init__(
        self,
        table_name: Optional[str] = None,
        region: str = 'us-east-1',
        dynamodb_resource=None
    ):
        """
        Initialize DynamoDB document store.

        Args:
            table_name: Table name (default: DOCUMENTS_TABLE_NAME from environment)
            region: AWS region for DynamoDB
            dynamodb_resource: Optional boto3 DynamoDB resource for testing
        """
        self.table_name = table_name or get_table_name('DOCUMENTS_TABLE_NAME')
        self.dynamodb = dynamodb_resource or boto3.resource('dynamodb', region_name=region)
        self.table = self.dynamodb.Table(self.table_name)

    async def get(self, path: str) -> Optional[Dict[str, Any]]:
        validate_path(path)
        response = await self._call(
            'get_item',
            self.table.get_item,
            Key={PATH_ATTRIBUTE: path},
            ConsistentRead=True
        )
        item = response.get('Item')
        if item is None:
            return None

        item.pop(PATH_ATTRIBUTE, None)
        return from_dynamodb_value(item)

    async def set(self, path: str, fields: Dict[str, Any]) -> None:
        validate_path(path)
        item = to_dynamodb_value(dict(fields), self._now())
        item[PATH_ATTRIBUTE] = path
        await self._call('put_item', self.table.put_item, Item=item)

    async def update(self, path: str, fields: Dict[str, Any]) -> None:
        validate_path(path)
        await self._update_fields(path, fields, must_exist=True)

    async def set_fields(self, path: str, fields: Dict[str, Any]) -> None:
        validate_path(path)
        await self._update_fields(path, fields, must_exist=False)

    async def delete(self, path: str) -> None:
        validate_path(path)
        await self._call(
            'delete_item',
            self.table.delete_item,
            Key={PATH_ATTRIBUTE: path}
        )

    async def _update_fields(
        self,
        path: str,
        fields: Dict[str, Any],
        must_exist: bool
    ) -> None:
        """
        Apply a SET update expression for the given fields.

        Raises:
            DocumentNotFoundError: If must_exist and the document is absent
        """
        values = to_dynamodb_value(
            {key: value for key, value in fields.items() if key != PATH_ATTRIBUTE},
            self._now()
        )

        if not values:
            if must_exist:
                if await self.get(path) is None:
                    raise DocumentNotFoundError(f'Document not found: {path}')
                return
            await self._call(
                'put_item',
                self.table.put_item,
                ignore_conditional_failure=True,
                Item={PATH_ATTRIBUTE: path},
                ConditionExpression='attribute_not_exists(#pk)',
                ExpressionAttributeNames={'#pk': PATH_ATTRIBUTE}
            )
            return

        names = {}
        attribute_values = {}
        assignments = []
        for index, (field, value) in enumerate(values.items()):
            names[f'#f{index}'] = field
            attribute_values[f':v{index}'] = value
            assignments.append(f'#f{index} = :v{index}')

        kwargs = {
            'Key': {PATH_ATTRIBUTE: path},
            'UpdateExpression': 'SET ' + ', '.join(assignments),
            'ExpressionAttributeNames': names,
            'ExpressionAttributeValues': attribute_values,
        }
        if must_exist:
            names['#pk'] = PATH_ATTRIBUTE
            kwargs['ConditionExpression'] = 'attribute_exists(#pk)'

        try:
            await self._call('update_item', self.table.update_item, **kwargs)
        except _ConditionalCheckFailed:
            raise DocumentNotFoundError(f'Document not found: {path}')

    async def _call(
        self,
        operation: str,
        method: Callable[..., Dict[str, Any]],
        ignore_conditional_failure: bool = False,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Run a blocking boto3 call in the default executor and map its errors.

        Raises:
            RetryableError: On throttling, service or connection errors
            DocumentStoreError: On other DynamoDB errors
        """
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, functools.partial(method, **kwargs))
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            if error_code == 'ConditionalCheckFailedException':
                if ignore_conditional_failure:
                    return {}
                raise _ConditionalCheckFailed(str(e))
            if error_code in RETRYABLE_ERROR_CODES:
                logger.warning(f"Retryable error during {operation} on {self.table_name}: {e}")
                raise RetryableError(f"{operation} failed: {error_code}")
            logger.error(f"Error during {operation} on {self.table_name}: {e}")
            raise DocumentStoreError(f"{operation} failed: {e}")
        except BotoCoreError as e:
            logger.warning(f"Connection error during {operation} on {self.table_name}: {e}")
            raise RetryableError(f"{operation} failed: {e}")

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)


class _ConditionalCheckFailed(DocumentStoreError):
    """Internal signal for a failed ConditionExpression."""
    pass
