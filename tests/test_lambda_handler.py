"""Tests for AWS Lambda handler."""

import base64
import json

from lambda_handler import lambda_handler

BUNDLE_REQUEST = {
    "input": {
        "monthlyRevenueRange": "25K-75K",
        "monthlyTransactions": "100-300",
        "industry": "Professional Services",
        "serviceMonthlyBookkeeping": True,
        "serviceTaasMonthly": True,
    },
    "calendarMonth": 6,
}


class TestLambdaHandler:
    """Test the Lambda handler routes and responses."""

    def test_health_check(self):
        """GET /health returns healthy status."""
        event = {"httpMethod": "GET", "path": "/health"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "healthy"

    def test_api_info(self):
        """GET /api returns API information."""
        event = {"httpMethod": "GET", "path": "/api"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "ok"
        assert "endpoints" in body
        assert body["constantsVersion"]

    def test_cors_preflight(self):
        """OPTIONS requests return CORS headers."""
        event = {"httpMethod": "OPTIONS", "path": "/calculate_pricing"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert "Access-Control-Allow-Origin" in response["headers"]
        assert "Access-Control-Allow-Methods" in response["headers"]

    def test_not_found(self):
        """Unknown paths return 404."""
        event = {"httpMethod": "GET", "path": "/unknown"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 404

    def test_calculate_pricing_success(self):
        """POST /calculate_pricing prices a bundled quote."""
        event = {"httpMethod": "POST", "path": "/calculate_pricing", "body": json.dumps(BUNDLE_REQUEST)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["display"]["bookkeepingMonthlyFee"] == 275
        assert body["display"]["totalSetupFee"] == 825
        assert body["pricing"]["bookkeeping"]["breakdown"]["monthlyFeeBeforeDiscount"] == 550

    def test_calculate_pricing_base64_body(self):
        """Base64-encoded bodies from API Gateway are decoded."""
        encoded = base64.b64encode(json.dumps(BUNDLE_REQUEST).encode("utf-8")).decode("ascii")
        event = {
            "httpMethod": "POST",
            "path": "/calculate_pricing",
            "body": encoded,
            "isBase64Encoded": True,
        }
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200

    def test_calculate_pricing_empty_body(self):
        """POST /calculate_pricing with empty body returns 400."""
        event = {"httpMethod": "POST", "path": "/calculate_pricing", "body": ""}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert "error" in body

    def test_calculate_pricing_invalid_json(self):
        """POST /calculate_pricing with invalid JSON returns 400."""
        event = {"httpMethod": "POST", "path": "/calculate_pricing", "body": "not valid json"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert "error" in body

    def test_calculate_pricing_validation_error(self):
        """Calendar month outside 1..12 returns 400 validation_failed."""
        payload = dict(BUNDLE_REQUEST, calendarMonth=13)
        event = {"httpMethod": "POST", "path": "/calculate_pricing", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert body["status"] == "validation_failed"

    def test_calculate_pricing_configuration_error(self):
        """A revenue range with no constants entry returns 400 configuration_error."""
        payload = {
            "input": dict(BUNDLE_REQUEST["input"], monthlyRevenueRange="5M+"),
            "calendarMonth": 1,
        }
        event = {"httpMethod": "POST", "path": "/calculate_pricing", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert body["status"] == "configuration_error"

    def test_commission_projection(self):
        """POST /commission_projection projects commission for a fee pair."""
        event = {
            "httpMethod": "POST",
            "path": "/commission_projection",
            "body": json.dumps({"monthlyFee": 275, "setupFee": 825}),
        }
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["setupCommission"] == 165.0
        assert body["twelveMonthTotal"] == 577.5

    def test_dict_body(self):
        """Bodies already parsed by the caller are accepted."""
        event = {"httpMethod": "POST", "path": "/calculate_pricing", "body": BUNDLE_REQUEST}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200

    def test_http_api_format(self):
        """Supports HTTP API v2 event format."""
        event = {"requestContext": {"http": {"method": "GET"}}, "rawPath": "/health"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
