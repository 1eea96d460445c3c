"""DynamoDB-backed listing repository."""

from decimal import Decimal
from typing import Any, Dict, List

from boto3.dynamodb.types import TypeDeserializer
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_aws_error
from modules.listings.models import CarListing

logger = get_module_logger()

_deserializer = TypeDeserializer()


def _plain(value: Any) -> Any:
    """Convert DynamoDB Decimals into int/float, recursively."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, set)):
        return [_plain(v) for v in value]
    return value


def deserialize_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """Typed DynamoDB item ({"price": {"N": "1"}}) into plain Python values."""
    return {key: _plain(_deserializer.deserialize(value)) for key, value in item.items()}


class ListingRepository:
    """Reads car listings from a DynamoDB table.

    Args:
        client: boto3 DynamoDB client
        table_name: Table holding listings
    """

    def __init__(self, client: Any, table_name: str):
        self._client = client
        self.table_name = table_name

    def list_all(self) -> OperationResult:
        """Scan the whole table, following LastEvaluatedKey across pages.

        Records that do not match the listing schema are skipped and logged.

        Returns:
            OperationResult with the list of CarListing in ``data``.
        """
        try:
            paginator = self._client.get_paginator("scan")
            items: List[Dict[str, Any]] = []
            for page in paginator.paginate(TableName=self.table_name):
                items.extend(page.get("Items", []))
        except (BotoCoreError, ClientError) as e:
            result = classify_aws_error(e)
            logger.error(
                "listings_scan_failed",
                table=self.table_name,
                error_code=result.error_code,
                transient=result.is_transient,
                error=result.message,
            )
            return result

        listings: List[CarListing] = []
        for item in items:
            try:
                listings.append(CarListing.model_validate(deserialize_item(item)))
            except ValidationError as e:
                logger.warning(
                    "listing_record_invalid",
                    table=self.table_name,
                    errors=e.error_count(),
                )
        logger.info("listings_loaded", count=len(listings), skipped=len(items) - len(listings))
        return OperationResult.success(data=listings, message="Listings loaded")

    def health_check(self) -> OperationResult:
        """Cheap describe_table call to verify the table is reachable."""
        try:
            response = self._client.describe_table(TableName=self.table_name)
        except (BotoCoreError, ClientError) as e:
            return classify_aws_error(e)
        return OperationResult.success(
            data={"status": response["Table"]["TableStatus"]},
            message="Listings table reachable",
        )
