from aws_cdk import (
    Stack,
    Duration,
    CfnOutput,
    RemovalPolicy,
    aws_apigateway as apigw,
    aws_lambda as _lambda,
    aws_logs as logs,
    aws_dynamodb as dynamodb,
)
from constructs import Construct


class ProductServiceStack(Stack):

    def __init__(self, scope: Construct, construct_id: str, stage: str = "dev", **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Single-table product store keyed by id
        product_table = dynamodb.Table(
            self,
            "ProductTable",
            table_name=f"product-{stage}",
            partition_key=dynamodb.Attribute(
                name="id", type=dynamodb.AttributeType.STRING
            ),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            removal_policy=RemovalPolicy.DESTROY,
        )

        # boto3 ships with the Lambda runtime, so the asset needs no bundling
        product_function = _lambda.Function(
            self,
            "ProductFunction",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="handler.lambda_handler",
            code=_lambda.Code.from_asset("lambda"),
            timeout=Duration.seconds(30),
            memory_size=256,
            environment={
                "DYNAMODB_TABLE_NAME": product_table.table_name,
                "PRIMARY_KEY": "id",
                "LOG_LEVEL": "DEBUG" if stage == "dev" else "INFO",
            },
        )

        product_table.grant_read_write_data(product_function)

        logs.LogGroup(
            self,
            "ProductFunctionLogGroup",
            log_group_name=f"/aws/lambda/{product_function.function_name}",
            retention=logs.RetentionDays.ONE_WEEK,
            removal_policy=RemovalPolicy.DESTROY,
        )

        # REST API (proxy integration) so events carry httpMethod/pathParameters
        api = apigw.LambdaRestApi(
            self,
            "ProductApi",
            rest_api_name=f"Product Service ({stage})",
            handler=product_function,
            proxy=False,
            deploy_options=apigw.StageOptions(stage_name=stage),
        )

        # GET /product, POST /product
        product = api.root.add_resource("product")
        product.add_method("GET")
        product.add_method("POST")

        # GET, PUT, DELETE /product/{id}
        single_product = product.add_resource("{id}")
        single_product.add_method("GET")
        single_product.add_method("PUT")
        single_product.add_method("DELETE")

        CfnOutput(
            self,
            "ApiUrl",
            value=api.url,
            description="Product API Gateway URL",
        )

        CfnOutput(
            self,
            "DynamoDBTableName",
            value=product_table.table_name,
            description="DynamoDB table name",
        )
