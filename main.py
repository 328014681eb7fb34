from flask import Flask, request, jsonify
from flask_cors import CORS
from quote_engine import (
    ConfigurationError,
    QuotePricingProcessor,
    default_constants,
    load_constants,
)
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the quote form calls the API from the browser)
CORS(app)

# Pricing constants: JSON file when configured, built-in price list otherwise
CONSTANTS_PATH = os.environ.get("PRICING_CONSTANTS_PATH")
constants = load_constants(CONSTANTS_PATH) if CONSTANTS_PATH else default_constants()

# Initialize the quote pricing processor
processor = QuotePricingProcessor(constants)


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Quote Pricing Calculator API",
        "version": "1.0",
        "constantsVersion": constants.version,
        "endpoints": {
            "calculate_pricing": "/calculate_pricing [POST]",
            "commission_projection": "/commission_projection [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/calculate_pricing", methods=["POST"])
def calculate_pricing():
    """
    Price a quote: per-service fees, combined totals and commission
    """
    input_data = request.get_json(force=True, silent=True)
    if not input_data:
        return jsonify({
            "error": "No input data provided",
            "status": "failed"
        }), 400

    return _run(lambda: processor.process_from_dict(input_data), "quote")


@app.route("/commission_projection", methods=["POST"])
def commission_projection():
    """
    Project commission for a monthly fee / setup fee pair
    """
    input_data = request.get_json(force=True, silent=True)
    if not input_data:
        return jsonify({
            "error": "No input data provided",
            "status": "failed"
        }), 400

    return _run(lambda: processor.commission_from_dict(input_data), "commission projection")


def _run(operation, label):
    try:
        logger.info(f"Processing {label}")
        result = operation()
        logger.info(f"{label.capitalize()} processed successfully")
        return jsonify(result), 200

    except ConfigurationError as e:
        # Constants table has no entry for something the quote uses
        logger.error(f"Configuration error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "configuration_error"
        }), 400

    except ValueError as e:
        # Validation errors from engine
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during processing",
            "status": "failed"
        }), 500


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
