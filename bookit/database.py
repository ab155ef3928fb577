from decimal import Decimal
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

import boto3
from boto3.dynamodb.conditions import Attr
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError

from bookit.config import Settings, get_settings

CONDITIONAL_FAILURES = ("ConditionalCheckFailedException", "TransactionCanceledException")


def to_dynamo(value: Any) -> Any:
    """Convert floats to Decimal recursively, DynamoDB rejects float numbers"""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamo(v) for v in value]
    return value


def from_dynamo(value: Any) -> Any:
    """Convert Decimal numbers back to int or float recursively"""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [from_dynamo(v) for v in value]
    return value


def _version_condition(expected_version: Optional[int]) -> Dict[str, Any]:
    """Build the optimistic-concurrency condition for a put.

    None writes unconditionally, 0 requires the item not to exist yet, any
    other value requires the stored version to match.
    """
    if expected_version is None:
        return {}
    if expected_version == 0:
        return {"ConditionExpression": "attribute_not_exists(pk)"}
    return {
        "ConditionExpression": "#version = :expected_version",
        "ExpressionAttributeNames": {"#version": "version"},
        "ExpressionAttributeValues": {":expected_version": expected_version},
    }


class DynamoDBClient:
    def __init__(self, settings: Settings):
        self.table_name = settings.table_name

        session_kwargs = dict(
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region,
            endpoint_url=settings.dynamodb_endpoint_url,
        )

        # Low level client for table description and transactions
        self.dynamodb = boto3.client('dynamodb', **session_kwargs)

        # Resource for item level operations
        self.dynamodb_resource = boto3.resource('dynamodb', **session_kwargs)

        self.serializer = TypeSerializer()

        if self.table_name:
            self.table = self.dynamodb_resource.Table(self.table_name)
        else:
            self.table = None

    def test_connection(self) -> Dict[str, Any]:
        """Test DynamoDB connection and return table info"""
        if not self.table_name:
            return {
                "status": "error",
                "error": "Table name not configured in environment variables"
            }

        try:
            response = self.dynamodb.describe_table(TableName=self.table_name)
            return {
                "status": "connected",
                "table_name": self.table_name,
                "table_status": response['Table']['TableStatus'],
                "item_count": response['Table']['ItemCount']
            }
        except ClientError as e:
            return {
                "status": "error",
                "error": str(e)
            }

    def put_item(self, item: Dict[str, Any], expected_version: Optional[int] = None) -> Dict[str, Any]:
        """Put item into the table, guarded by the stored version when one is expected"""
        try:
            response = self.table.put_item(
                Item=to_dynamo(item), **_version_condition(expected_version)
            )
            return {
                "status": "success",
                "response": response
            }
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in CONDITIONAL_FAILURES:
                return {
                    "status": "conflict",
                    "error": str(e)
                }
            return {
                "status": "error",
                "error": str(e)
            }

    def get_item(self, pk: str, sk: str) -> Dict[str, Any]:
        """Get item from the table"""
        try:
            response = self.table.get_item(
                Key={
                    'pk': pk,
                    'sk': sk
                }
            )
            if 'Item' in response:
                return {
                    "status": "success",
                    "item": from_dynamo(response['Item'])
                }
            else:
                return {
                    "status": "not_found",
                    "item": None
                }
        except ClientError as e:
            return {
                "status": "error",
                "error": str(e)
            }

    def delete_item(self, pk: str, sk: str) -> Dict[str, Any]:
        try:
            response = self.table.delete_item(Key={'pk': pk, 'sk': sk})
            return {
                "status": "success",
                "response": response
            }
        except ClientError as e:
            return {
                "status": "error",
                "error": str(e)
            }

    def scan_items(self, sk: str, filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Scan all items of one kind, optionally filtered by attribute equality"""
        try:
            condition = Attr('sk').eq(sk)
            for name, value in (filters or {}).items():
                condition = condition & Attr(name).eq(to_dynamo(value))

            items = []
            scan_kwargs = {'FilterExpression': condition}
            while True:
                response = self.table.scan(**scan_kwargs)
                items.extend(response['Items'])
                last_key = response.get('LastEvaluatedKey')
                if not last_key:
                    break
                scan_kwargs['ExclusiveStartKey'] = last_key

            return {
                "status": "success",
                "items": from_dynamo(items),
                "count": len(items)
            }
        except ClientError as e:
            return {
                "status": "error",
                "error": str(e)
            }

    def transact_put_items(self, puts: List[Tuple[Dict[str, Any], Optional[int]]]) -> Dict[str, Any]:
        """Put several items atomically, each guarded by its expected version"""
        transact_items = []
        for item, expected_version in puts:
            put = {
                "TableName": self.table_name,
                "Item": {k: self.serializer.serialize(v) for k, v in to_dynamo(item).items()},
            }
            condition = _version_condition(expected_version)
            if "ExpressionAttributeValues" in condition:
                condition["ExpressionAttributeValues"] = {
                    k: self.serializer.serialize(v)
                    for k, v in condition["ExpressionAttributeValues"].items()
                }
            put.update(condition)
            transact_items.append({"Put": put})

        try:
            response = self.dynamodb.transact_write_items(
                TransactItems=transact_items
            )
            return {
                "status": "success",
                "response": response
            }
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in CONDITIONAL_FAILURES:
                return {
                    "status": "conflict",
                    "error": str(e)
                }
            return {
                "status": "error",
                "error": str(e)
            }


@lru_cache()
def get_db_client() -> DynamoDBClient:
    """Shared database client, overridable as a FastAPI dependency"""
    return DynamoDBClient(get_settings())
