#!/usr/bin/env python3
import os
import aws_cdk as cdk
from product_service.product_service_stack import ProductServiceStack


app = cdk.App()

# STAGE names the deployment (dev/stage/prod). It suffixes the product table,
# the REST API stage and the stack name, and dev turns on DEBUG logging in the
# Lambda, so several stages of the product service can share one account.
stage = os.getenv("STAGE", "dev")

ProductServiceStack(
    app,
    f"ProductServiceStack-{stage}",
    stage=stage,
    # Account/Region are determined from the CLI or environment variables.
    env=cdk.Environment(
        account=os.getenv("CDK_DEFAULT_ACCOUNT"),
        region=os.getenv("CDK_DEFAULT_REGION"),
    ),
)

app.synth()
