"""
Catalog endpoints: products, collections and menus as JSON.
"""

from flask import Blueprint, request, jsonify
from storefront.adapters.base import CommerceAPIError
from storefront.constants import get_sort
from storefront.utils.logger import get_logger, log_with_context

bp = Blueprint('catalog', __name__, url_prefix='/api')
logger = get_logger(__name__)


@bp.errorhandler(CommerceAPIError)
def provider_error(e: CommerceAPIError):
    log_with_context(
        logger, "ERROR",
        "Catalog request failed",
        path=request.path,
        status=e.status,
        error=e.message
    )
    return jsonify({"status": "error", "message": "Store unavailable"}), 502


def _sort_args():
    """Sort from ?sort=<slug>, e.g. price-asc."""
    sort = get_sort(request.args.get('sort'))
    return sort.sort_key, sort.reverse


@bp.route('/products', methods=['GET'])
def list_products():
    """
    Search products.

    Query parameters:
        q: keyword
        sort: sort slug (latest-desc, price-asc, price-desc)
    """
    from storefront import get_adapter
    sort_key, reverse = _sort_args()

    products = get_adapter().get_products(
        query=request.args.get('q'),
        reverse=reverse,
        sort_key=sort_key
    )

    return jsonify({"products": [p.to_dict() for p in products]}), 200


@bp.route('/products/<handle>', methods=['GET'])
def get_product(handle):
    from storefront import get_adapter

    product = get_adapter().get_product(handle)
    if not product:
        return jsonify({"status": "error", "message": "Product not found"}), 404

    return jsonify(product.to_dict()), 200


@bp.route('/products/<product_id>/recommendations', methods=['GET'])
def product_recommendations(product_id):
    from storefront import get_adapter

    products = get_adapter().get_product_recommendations(product_id)
    return jsonify({"products": [p.to_dict() for p in products]}), 200


@bp.route('/collections', methods=['GET'])
def list_collections():
    from storefront import get_adapter

    collections = get_adapter().get_collections()
    return jsonify({"collections": [c.to_dict() for c in collections]}), 200


@bp.route('/collections/<handle>', methods=['GET'])
def get_collection(handle):
    from storefront import get_adapter

    collection = get_adapter().get_collection(handle)
    if not collection:
        return jsonify({"status": "error", "message": "Collection not found"}), 404

    return jsonify(collection.to_dict()), 200


@bp.route('/collections/<handle>/products', methods=['GET'])
def collection_products(handle):
    from storefront import get_adapter
    sort_key, reverse = _sort_args()

    products = get_adapter().get_collection_products(
        handle,
        reverse=reverse,
        sort_key=sort_key
    )

    return jsonify({"products": [p.to_dict() for p in products]}), 200


@bp.route('/menu/<handle>', methods=['GET'])
def get_menu(handle):
    from storefront import get_adapter

    menu = get_adapter().get_menu(handle)
    return jsonify({"menu": [m.to_dict() for m in menu]}), 200
