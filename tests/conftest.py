"""Pytest configuration and fixtures."""
import copy
import os
import sys

import pytest

# Ensure lambda package is on path (lambda is a reserved name so we add the dir)
_lambda_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "lambda")
if _lambda_dir not in sys.path:
    sys.path.insert(0, _lambda_dir)

# Set before any lambda imports so boto3 has a region at import time (CI has no AWS config)
os.environ.setdefault("DYNAMODB_TABLE_NAME", "test-product-table")
if not os.environ.get("AWS_REGION") and not os.environ.get("AWS_DEFAULT_REGION"):
    os.environ["AWS_REGION"] = "us-east-1"

_ACK = {"ResponseMetadata": {"HTTPStatusCode": 200, "RetryAttempts": 0}}


class InMemoryProductsRepository:
    """Dict-backed stand-in for ProductsRepository with the same table semantics."""

    def __init__(self):
        self.items = {}

    def get_product(self, product_id):
        item = self.items.get(product_id)
        return copy.deepcopy(item) if item is not None else None

    def list_products(self):
        return [copy.deepcopy(i) for i in self.items.values()]

    def query_by_category(self, product_id, category):
        item = self.items.get(product_id)
        if item is None or category is None:
            return []
        value = item.get("category")
        if value is None:
            return []
        if isinstance(value, str):
            matched = category in value
        else:
            matched = category in list(value)
        return [copy.deepcopy(item)] if matched else []

    def put_product(self, product):
        self.items[product["id"]] = copy.deepcopy(product)
        return copy.deepcopy(_ACK)

    def delete_product(self, product_id):
        self.items.pop(product_id, None)
        return copy.deepcopy(_ACK)

    def update_product(self, product_id, update_expression, names, values):
        assert update_expression.startswith("SET ")
        item = self.items.setdefault(product_id, {"id": product_id})
        for assignment in update_expression[len("SET "):].split(", "):
            name_placeholder, value_placeholder = assignment.split(" = ")
            item[names[name_placeholder]] = copy.deepcopy(values[value_placeholder])
        return copy.deepcopy(_ACK)


@pytest.fixture
def repository():
    return InMemoryProductsRepository()


@pytest.fixture
def service(repository):
    from services.products_service import ProductsService

    return ProductsService(repository)
