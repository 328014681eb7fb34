"""
AWS Lambda handler for the Quote Pricing API.

This is the production entry point for AWS Lambda deployments.
For local development, use main.py (Flask app) instead.
"""

import base64
import json
import logging
import os

from quote_engine import ConfigurationError, QuotePricingProcessor, default_constants, load_constants

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Environment (dev, staging, prod)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")

# Pricing constants: JSON file when configured, built-in price list otherwise
CONSTANTS_PATH = os.environ.get("PRICING_CONSTANTS_PATH")
constants = load_constants(CONSTANTS_PATH) if CONSTANTS_PATH else default_constants()

# Initialize processor (reused across warm invocations)
processor = QuotePricingProcessor(constants)

# CORS headers for API Gateway
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Handles API Gateway events for:
    - GET /health
    - GET /api
    - POST /calculate_pricing
    - POST /commission_projection
    - OPTIONS (CORS preflight)
    """
    # Handle CORS preflight
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    # Get path (supports both REST API and HTTP API formats)
    path = event.get("path") or event.get("rawPath", "")

    # Route to appropriate handler
    if path == "/health" and http_method == "GET":
        return handle_health()
    elif path == "/calculate_pricing" and http_method == "POST":
        return handle_request(event, processor.process_from_dict, "quote")
    elif path == "/commission_projection" and http_method == "POST":
        return handle_request(event, processor.commission_from_dict, "commission projection")
    elif path == "/api" and http_method == "GET":
        return handle_api_info()
    else:
        return _response(404, {"error": "Not found", "path": path})


def handle_health():
    """Health check endpoint."""
    return _response(200, {"status": "healthy", "environment": ENVIRONMENT})


def handle_api_info():
    """API information endpoint."""
    return _response(
        200,
        {
            "status": "ok",
            "message": "Quote Pricing Calculator API",
            "version": "1.0",
            "environment": ENVIRONMENT,
            "runtime": "AWS Lambda",
            "constantsVersion": constants.version,
            "endpoints": {
                "calculate_pricing": "/calculate_pricing [POST]",
                "commission_projection": "/commission_projection [POST]",
                "health": "/health [GET]",
            },
        },
    )


def handle_request(event, operation, label):
    """Parse the request body and run one engine operation on it."""
    try:
        # Parse request body
        body = event.get("body", "")
        if isinstance(body, str):
            if not body:
                return _response(400, {"error": "No input data provided", "status": "failed"})
            # Handle base64 encoded body (API Gateway)
            if event.get("isBase64Encoded"):
                body = base64.b64decode(body).decode("utf-8")
            input_data = json.loads(body)
        else:
            input_data = body

        logger.info(f"Processing {label}")

        result = operation(input_data)

        logger.info(f"{label.capitalize()} processed successfully")

        return _response(200, result)

    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return _response(400, {"error": f"Invalid JSON: {str(e)}", "status": "failed"})

    except ConfigurationError as e:
        logger.error(f"Configuration error: {str(e)}")
        return _response(400, {"error": f"Configuration error: {str(e)}", "status": "configuration_error"})

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors from engine (missing fields, invalid types, etc.)
        logger.error(f"Validation error: {str(e)}")
        return _response(400, {"error": f"Validation error: {str(e)}", "status": "validation_failed"})

    except Exception as e:
        # Unexpected errors - log details but return generic message
        logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
        return _response(500, {"error": "An unexpected error occurred during processing", "status": "failed"})


def _response(status_code, payload):
    return {"statusCode": status_code, "headers": CORS_HEADERS, "body": json.dumps(payload)}
