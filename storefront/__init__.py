"""
Flask application factory and service initialization.
"""

from typing import Optional

from flask import Flask, jsonify
from storefront.config import Config
from storefront.adapters.base import CommerceAdapter
from storefront.adapters.ecwid import EcwidAdapter
from storefront.clients.ecwid_client import EcwidClient
from storefront.services.storefront_service import StorefrontService
from storefront.services.tag_cache import TagCache
from storefront.utils.logger import get_logger

logger = get_logger(__name__)

# Global instances
_adapter = None
_storefront_service = None


def create_app(adapter: Optional[CommerceAdapter] = None):
    """
    Create and configure Flask application.

    Args:
        adapter: Commerce adapter to use instead of the Ecwid one built
                 from configuration

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    # Validate configuration
    try:
        Config.validate()
        logger.info("Configuration validated successfully")
    except ValueError as e:
        logger.error(f"Configuration validation failed: {str(e)}")
        raise

    global _adapter, _storefront_service

    if adapter is None:
        client = EcwidClient(
            Config.ECWID_STORE_ID,
            Config.ECWID_API_KEY,
            Config.API_TIMEOUT,
            cache=TagCache(Config.CACHE_MAX_SIZE, Config.CACHE_TTL)
        )
        adapter = EcwidAdapter(client)
        logger.info("Initialized Ecwid adapter")

    _adapter = adapter

    # Store currency is shared by every request from here on
    _adapter.load_currency_code()

    _storefront_service = StorefrontService(_adapter, Config.ECWID_STORE_ID)
    logger.info("Initialized storefront service")

    # Register blueprints
    from storefront.webhooks import revalidate
    from storefront.api import catalog, cart
    app.register_blueprint(revalidate.bp)
    app.register_blueprint(catalog.bp)
    app.register_blueprint(cart.bp)
    logger.info("Registered blueprints")

    @app.route('/health', methods=['GET'])
    def health():
        """
        Health check endpoint.

        Returns:
            200 OK if application is healthy
        """
        return jsonify({"status": "healthy"}), 200

    logger.info("Application initialized successfully")

    return app


def get_adapter() -> CommerceAdapter:
    """
    Get global adapter instance.

    Returns:
        CommerceAdapter instance
    """
    return _adapter


def get_service() -> StorefrontService:
    """
    Get global service instance.

    Returns:
        StorefrontService instance
    """
    return _storefront_service
