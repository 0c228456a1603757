import json
import logging
import traceback
from typing import Any, Dict, Optional

from config import configure_logging, load_settings
from services.products_service import ProductsService, convert_dynamodb_value, products_service

settings = load_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

GET = "GET"
POST = "POST"
DELETE = "DELETE"
PUT = "PUT"


class UnsupportedRouteError(Exception):
    """Raised when the event's HTTP method has no matching operation."""

    def __init__(self, method: Optional[str]) -> None:
        super().__init__(f"Unsupported route {method}")
        self.method = method


def _path_id(event: Dict[str, Any]) -> str:
    product_id = (event.get("pathParameters") or {}).get("id")
    if not product_id:
        raise ValueError("Missing path parameter 'id'")
    return product_id


def dispatch(event: Dict[str, Any], service: ProductsService) -> Any:
    """Run the one operation selected by the event's method and parameters.

    GET requests are routed on parameter shape: query string parameters
    select the category query, a path id alone selects get-by-id, and
    neither selects a full scan. Missing products and empty scans are
    returned as ``{}``; the category query always returns a list.
    """
    method = event.get("httpMethod")

    if method == GET:
        if event.get("queryStringParameters") is not None:
            category = event["queryStringParameters"].get("category")
            return service.query_by_category(_path_id(event), category)
        elif event.get("pathParameters") is not None:
            product = service.get_product(_path_id(event))
            return product if product is not None else {}
        else:
            return service.list_products() or {}
    elif method == POST:
        return service.create_product(event.get("body"))
    elif method == DELETE:
        return service.delete_product(_path_id(event))
    elif method == PUT:
        return service.update_product(_path_id(event), event.get("body"))

    raise UnsupportedRouteError(method)


def _json_default(value: Any) -> Any:
    converted = convert_dynamodb_value(value)
    if converted is value:
        return str(value)
    return converted


def success_response(method: str, body: Any) -> Dict[str, Any]:
    return {
        "statusCode": 200,
        "body": json.dumps(
            {
                "message": f'Successfully finished operation: "{method}"',
                "body": body,
            },
            default=_json_default,
        ),
    }


def error_response(error: Exception, expose_stack: bool = True) -> Dict[str, Any]:
    payload = {
        "message": "Failed to perform operation.",
        "errorMsg": str(error),
    }
    if expose_stack:
        payload["errorStack"] = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
    return {
        "statusCode": 500,
        "body": json.dumps(payload),
    }


def lambda_handler(event, context):
    """
    AWS Lambda handler for API Gateway REST proxy events with DynamoDB CRUD operations.

    Every failure, whatever its cause, is returned as a 500 envelope.
    """
    logger.info("request: %s", event.get("httpMethod"))
    logger.debug("event: %s", json.dumps(event, indent=2, default=str))

    try:
        body = dispatch(event, products_service)
        logger.debug("result: %s", body)
        return success_response(event.get("httpMethod"), body)
    except Exception as e:
        logger.exception("Failed to perform operation")
        return error_response(e, settings.expose_error_stack)
