import logging
import os
from dataclasses import dataclass

import boto3
from botocore.config import Config


DEFAULT_REGION = "us-west-2"


@dataclass(frozen=True)
class Settings:
    table_name: str
    primary_key: str = "id"
    region: str = DEFAULT_REGION
    log_level: str = "INFO"
    expose_error_stack: bool = True


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """Read settings from the Lambda environment.

    Fails fast during cold start if the table name is missing.
    """
    table_name = os.getenv("DYNAMODB_TABLE_NAME")
    if not table_name:
        raise RuntimeError("DYNAMODB_TABLE_NAME environment variable is required")

    return Settings(
        table_name=table_name,
        primary_key=os.getenv("PRIMARY_KEY", "id"),
        region=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or DEFAULT_REGION,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        expose_error_stack=_as_bool(os.getenv("EXPOSE_ERROR_STACK", "true")),
    )


def configure_logging(settings: Settings) -> None:
    # Lambda installs its own handler on the root logger; only the level is ours.
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level, logging.INFO))


def build_table(settings: Settings):
    """Create the DynamoDB table handle shared by every invocation."""
    dynamodb = boto3.resource("dynamodb", config=Config(region_name=settings.region))
    return dynamodb.Table(settings.table_name)
