"""Unit tests for products_repository (table calls)."""
from unittest.mock import MagicMock

import pytest
from boto3.dynamodb.conditions import Attr, Key

from repositories.products_repository import ProductsRepository


@pytest.fixture
def table():
    return MagicMock()


@pytest.fixture
def repo(table):
    return ProductsRepository(table)


class TestProductsRepository:
    def test_get_product_found(self, repo, table):
        table.get_item.return_value = {"Item": {"id": "p1", "name": "Widget"}}
        assert repo.get_product("p1") == {"id": "p1", "name": "Widget"}
        table.get_item.assert_called_once_with(Key={"id": "p1"})

    def test_get_product_missing(self, repo, table):
        table.get_item.return_value = {}
        assert repo.get_product("nope") is None

    def test_list_products_reads_first_page_only(self, repo, table):
        table.scan.return_value = {
            "Items": [{"id": "p1"}],
            "LastEvaluatedKey": {"id": "p1"},
        }
        assert repo.list_products() == [{"id": "p1"}]
        table.scan.assert_called_once_with()

    def test_list_products_empty(self, repo, table):
        table.scan.return_value = {"Items": []}
        assert repo.list_products() == []

    def test_query_by_category(self, repo, table):
        table.query.return_value = {"Items": [{"id": "p1", "category": "tools"}]}
        assert repo.query_by_category("p1", "tools") == [{"id": "p1", "category": "tools"}]

        kwargs = table.query.call_args.kwargs
        assert kwargs["KeyConditionExpression"] == Key("id").eq("p1")
        assert kwargs["FilterExpression"] == Attr("category").contains("tools")

    def test_put_product_returns_acknowledgment(self, repo, table):
        table.put_item.return_value = {"ResponseMetadata": {"HTTPStatusCode": 200}}
        ack = repo.put_product({"id": "p1", "name": "Widget"})
        assert ack == {"ResponseMetadata": {"HTTPStatusCode": 200}}
        table.put_item.assert_called_once_with(Item={"id": "p1", "name": "Widget"})

    def test_delete_product_does_not_check_existence(self, repo, table):
        table.delete_item.return_value = {"ResponseMetadata": {"HTTPStatusCode": 200}}
        repo.delete_product("p1")
        table.get_item.assert_not_called()
        table.delete_item.assert_called_once_with(Key={"id": "p1"})

    def test_update_product(self, repo, table):
        repo.update_product("p1", "SET #key0 = :value0", {"#key0": "category"}, {":value0": "c2"})
        table.update_item.assert_called_once_with(
            Key={"id": "p1"},
            UpdateExpression="SET #key0 = :value0",
            ExpressionAttributeNames={"#key0": "category"},
            ExpressionAttributeValues={":value0": "c2"},
        )

    def test_custom_primary_key(self, table):
        repo = ProductsRepository(table, primary_key="sku")
        table.get_item.return_value = {}
        repo.get_product("s1")
        table.get_item.assert_called_once_with(Key={"sku": "s1"})
