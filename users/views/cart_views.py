from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from ..services.cart_service import Cart
from users.helpers.response import APIResponse
from users.helpers.request import parse_json_body


@csrf_exempt
@require_http_methods(["POST"])
def get_cart_summary(request):
    """Price a client-held cart: {"cart": [{"product": {"id": "1"}, "count": 2}]}."""
    data, error = parse_json_body(request)
    if error:
        return error

    if 'cart' not in data:
        return APIResponse.missing_fields(['cart'])

    cart = Cart.from_storage(data['cart'])
    return APIResponse.success(data=cart.summary())
