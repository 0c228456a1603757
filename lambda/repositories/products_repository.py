import logging
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr, Key


logger = logging.getLogger(__name__)


class ProductsRepository:
    """Data access layer for products stored in DynamoDB.

    Every method maps onto exactly one table call. Marshalling between
    Python values and DynamoDB attribute types is left to the boto3
    resource layer, so callers pass and receive plain dicts (numbers come
    back as ``Decimal``).

    The table handle is injected so that a single handle can be shared by
    all invocations in an execution environment, and so tests can pass a
    stub in its place.
    """

    def __init__(self, table: Any, primary_key: str = "id") -> None:
        self._table = table
        self._primary_key = primary_key

    def _key(self, product_id: str) -> Dict[str, str]:
        return {self._primary_key: product_id}

    def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        response = self._table.get_item(Key=self._key(product_id))
        return response.get("Item")

    def list_products(self) -> List[Dict[str, Any]]:
        """Return the first page of a full table scan.

        LastEvaluatedKey is ignored; tables larger than one scan page
        (1 MB) are truncated.
        """
        response = self._table.scan()
        return response.get("Items", [])

    def query_by_category(self, product_id: str, category: str) -> List[Dict[str, Any]]:
        response = self._table.query(
            KeyConditionExpression=Key(self._primary_key).eq(product_id),
            FilterExpression=Attr("category").contains(category),
        )
        return response.get("Items", [])

    def put_product(self, product: Dict[str, Any]) -> Dict[str, Any]:
        return self._table.put_item(Item=product)

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        # No existence check: deleting a missing key succeeds.
        return self._table.delete_item(Key=self._key(product_id))

    def update_product(
        self,
        product_id: str,
        update_expression: str,
        expression_attribute_names: Dict[str, str],
        expression_attribute_values: Dict[str, Any],
    ) -> Dict[str, Any]:
        logger.debug("UpdateExpression: %s", update_expression)
        return self._table.update_item(
            Key=self._key(product_id),
            UpdateExpression=update_expression,
            ExpressionAttributeNames=expression_attribute_names,
            ExpressionAttributeValues=expression_attribute_values,
        )
