"""
Cart endpoints. Cart id and checkout session token travel as cookies.
"""

from flask import Blueprint, request, jsonify
from storefront.adapters.base import CommerceAPIError
from storefront.utils.logger import get_logger, log_with_context

bp = Blueprint('cart', __name__, url_prefix='/api/cart')
logger = get_logger(__name__)


def _respond(cookies: dict, before: dict, error, status: int = 200):
    """
    Build the action response and persist cookies the action set.

    Errors are user-facing messages from the service. Cookies are set even
    when the cart snapshot cannot be read back.
    """
    if error:
        response = jsonify({"status": "error", "message": error})
        response.status_code = 400
    else:
        from storefront import get_service
        try:
            cart = get_service().get_cart(cookies)
        except CommerceAPIError as e:
            log_with_context(
                logger, "WARNING",
                "Cart snapshot unavailable after update",
                path=request.path,
                status=e.status,
                error=e.message
            )
            cart = None
        response = jsonify({"status": "success", "cart": cart.to_dict() if cart else None})
        response.status_code = status

    for name, value in cookies.items():
        if before.get(name) != value:
            response.set_cookie(name, value, httponly=True, samesite='Lax')

    return response


@bp.errorhandler(CommerceAPIError)
def provider_error(e: CommerceAPIError):
    log_with_context(
        logger, "ERROR",
        "Cart request failed",
        path=request.path,
        status=e.status,
        error=e.message
    )
    return jsonify({"status": "error", "message": "Store unavailable"}), 502


@bp.route('', methods=['GET'])
def get_cart():
    from storefront import get_service

    cart = get_service().get_cart(dict(request.cookies))
    return jsonify({"cart": cart.to_dict() if cart else None}), 200


@bp.route('/items', methods=['POST'])
def add_item():
    """
    Add one unit of a variant.

    Expected payload:
    {
        "variantId": "123|Size:M"
    }
    """
    from storefront import get_service

    data = request.get_json(silent=True) or {}
    cookies = dict(request.cookies)
    before = dict(cookies)

    error = get_service().add_item(cookies, data.get('variantId'))
    return _respond(cookies, before, error, status=201)


@bp.route('/items/<path:line_id>', methods=['DELETE'])
def remove_item(line_id):
    from storefront import get_service

    cookies = dict(request.cookies)
    before = dict(cookies)

    error = get_service().remove_item(cookies, line_id)
    return _respond(cookies, before, error)


@bp.route('/items/<path:line_id>', methods=['PATCH'])
def update_item(line_id):
    """
    Set a line's quantity.

    Expected payload:
    {
        "quantity": 2,
        "variantId": "123|Size:M"   // optional, defaults to the line id
    }
    """
    from storefront import get_service

    data = request.get_json(silent=True) or {}
    quantity = data.get('quantity')
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 0:
        return jsonify({"status": "error", "message": "Invalid quantity"}), 400

    cookies = dict(request.cookies)
    before = dict(cookies)

    error = get_service().update_item_quantity(
        cookies,
        line_id,
        data.get('variantId') or line_id,
        quantity
    )
    return _respond(cookies, before, error)
