from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple
import base64
import json
import logging
import uuid

from boto3.dynamodb.types import Binary

from config import build_table, load_settings
from repositories.products_repository import ProductsRepository


logger = logging.getLogger(__name__)


def convert_dynamodb_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a DynamoDB item to a regular Python dict.

    boto3 resource returns Decimal objects for numbers, which aren't JSON
    serializable. This recursively converts them to int or float.
    """
    if not item:
        return item
    return {key: convert_dynamodb_value(value) for key, value in item.items()}


def convert_dynamodb_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        # Whole numbers become int, everything else float. Stored numbers
        # can exceed the default 28-digit context, so no arithmetic here.
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    elif isinstance(value, Binary):
        return base64.b64encode(value.value).decode("ascii")
    elif isinstance(value, dict):
        return convert_dynamodb_item(value)
    elif isinstance(value, (list, tuple)):
        return [convert_dynamodb_value(v) for v in value]
    elif isinstance(value, (set, frozenset)):
        # String/number/binary sets have no JSON form
        members = [convert_dynamodb_value(v) for v in value]
        if all(isinstance(m, str) for m in members) or all(
            isinstance(m, (int, float)) and not isinstance(m, bool) for m in members
        ):
            return sorted(members)
        return members
    return value


def parse_body(body: Optional[str]) -> Dict[str, Any]:
    """Decode a request body into a JSON object.

    Floats are decoded as Decimal, the only non-integer number type the
    boto3 resource layer will marshal.
    """
    if body is None:
        raise ValueError("Request body is required")
    parsed = json.loads(body, parse_float=Decimal)
    if not isinstance(parsed, dict):
        raise ValueError("Request body must be a JSON object")
    return parsed


def build_update_expression(
    attributes: Mapping[str, Any], key_attribute: str = "id"
) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
    """Build a SET update expression covering every attribute in ``attributes``.

    Each attribute gets a ``#keyN`` name placeholder and a ``:valueN`` value
    placeholder, numbered in iteration order, so arbitrary attribute names
    (including reserved words) are safe. The key attribute is skipped since
    it cannot be updated.

    Returns a tuple of (UpdateExpression, ExpressionAttributeNames,
    ExpressionAttributeValues).
    """
    fields = [(name, value) for name, value in attributes.items() if name != key_attribute]
    if not fields:
        raise ValueError("No attributes to update")

    assignments = []
    names: Dict[str, str] = {}
    values: Dict[str, Any] = {}
    for index, (name, value) in enumerate(fields):
        assignments.append(f"#key{index} = :value{index}")
        names[f"#key{index}"] = name
        values[f":value{index}"] = value

    return "SET " + ", ".join(assignments), names, values


class ProductsService:
    """Domain-level operations for products.

    Each operation is a single repository call. This layer parses request
    bodies, assigns ids and converts store types to JSON-friendly ones; it
    knows nothing about API Gateway events, which the handler deals with.

    Absence is reported explicitly: ``None`` for a missing product and an
    empty list for an empty collection.
    """

    def __init__(self, repository: ProductsRepository, primary_key: str = "id") -> None:
        self._repository = repository
        self._primary_key = primary_key

    # Query operations
    def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        logger.info("getProduct id=%s", product_id)
        raw = self._repository.get_product(product_id)
        if raw is None:
            return None
        return convert_dynamodb_item(raw)

    def list_products(self) -> List[Dict[str, Any]]:
        logger.info("getAllProducts")
        return [convert_dynamodb_item(i) for i in self._repository.list_products()]

    def query_by_category(self, product_id: str, category: Optional[str]) -> List[Dict[str, Any]]:
        logger.info("getProductsByCategory id=%s category=%s", product_id, category)
        raw_items = self._repository.query_by_category(product_id, category)
        return [convert_dynamodb_item(i) for i in raw_items]

    # Mutation operations
    def create_product(self, body: Optional[str]) -> Dict[str, Any]:
        """Store ``body`` as a new product under a fresh UUID.

        Any client-supplied id is overwritten. Returns the store
        acknowledgment with the generated id added to it.
        """
        product = parse_body(body)
        product[self._primary_key] = str(uuid.uuid4())
        logger.info("createProduct id=%s", product[self._primary_key])

        result = self._repository.put_product(product)
        acknowledgment = convert_dynamodb_item(result) or {}
        acknowledgment[self._primary_key] = product[self._primary_key]
        return acknowledgment

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        logger.info("deleteProduct id=%s", product_id)
        return convert_dynamodb_item(self._repository.delete_product(product_id))

    def update_product(self, product_id: str, body: Optional[str]) -> Dict[str, Any]:
        attributes = parse_body(body)
        logger.info("updateProduct id=%s keys=%s", product_id, list(attributes))

        expression, names, values = build_update_expression(attributes, self._primary_key)
        result = self._repository.update_product(product_id, expression, names, values)
        return convert_dynamodb_item(result)


def create_default_service() -> ProductsService:
    settings = load_settings()
    return ProductsService(
        ProductsRepository(build_table(settings), settings.primary_key),
        settings.primary_key,
    )


# Module-level singleton used by the Lambda handler.
products_service = create_default_service()
