"""
Tests for structured logging helpers.
"""

import json
import logging

from storefront.utils.logger import JSONFormatter, mask_token


def _record(**extra):
    record = logging.LogRecord("storefront.test", logging.INFO, __file__, 1, "Cart created", None, None)
    if extra:
        record.extra_data = extra
    return record


def test_json_formatter_utc_timestamp():
    data = json.loads(JSONFormatter().format(_record(cart_hash="abc")))

    assert data["timestamp"].endswith("Z")
    assert "+00:00" not in data["timestamp"]
    assert data["level"] == "INFO"
    assert data["message"] == "Cart created"
    assert data["cart_hash"] == "abc"


def test_mask_token():
    assert mask_token(None) == "none"
    assert mask_token("tok") == mask_token("tok")
    assert len(mask_token("tok")) == 12
    assert "tok" not in mask_token("tok")
