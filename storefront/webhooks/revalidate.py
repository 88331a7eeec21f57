"""
Webhook endpoint for Ecwid cache revalidation.
"""

import time

from flask import Blueprint, request, jsonify
from storefront.services.revalidation import revalidate_event
from storefront.utils.validators import validate_revalidation_secret
from storefront.utils.logger import get_logger

bp = Blueprint('revalidate', __name__)
logger = get_logger(__name__)


@bp.route('/api/revalidate', methods=['POST'])
def revalidate():
    """
    Revalidate cached catalog data after an Ecwid event.

    Expected payload from Ecwid:
    {
        "eventType": "product.updated",
        ...
    }

    Always answers 200: Ecwid keeps retrying any other status.

    Returns:
    {
        "status": 200,
        "revalidated": true,
        "now": 1730290496000
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        event_type = data.get('eventType') if isinstance(data, dict) else None

        secret = request.headers.get('X-Ecwid-Revalidation-Secret')

        from storefront import get_adapter
        result = revalidate_event(
            get_adapter(),
            event_type,
            validate_revalidation_secret(secret)
        )

        if not result.revalidated:
            return jsonify({"status": 200}), 200

        return jsonify({
            "status": 200,
            "revalidated": True,
            "now": int(time.time() * 1000)
        }), 200

    except Exception:
        logger.exception("Unexpected error in revalidate webhook")
        return jsonify({"status": 200}), 200
