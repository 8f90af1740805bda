from django.shortcuts import render
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from users.services.cart_service import Cart
from users.services.payment_service import PaymentService
from users.helpers.response import APIResponse
from users.helpers.request import parse_json_body, parse_form_or_json
from users.helpers.require_login import user_required


def wants_html(request):
    return request.GET.get('format') == 'html' or 'text/html' in request.META.get('HTTP_ACCEPT', '')


@csrf_exempt
@require_http_methods(["POST"])
@user_required
def checkout(request):
    data, error = parse_json_body(request)
    if error:
        return error

    if 'cart' not in data:
        return APIResponse.missing_fields(['cart'])

    cart = Cart.from_storage(data['cart'])
    payment = PaymentService.build_checkout(request.user, cart)

    if wants_html(request):
        return render(request, 'users/checkout_redirect.html', payment)

    return APIResponse.success(data=payment, message='Redirect to payment gateway')


@csrf_exempt
@require_http_methods(["POST"])
def payment_notify(request):
    """Gateway callback; authenticated by signature, not by session."""
    data, error = parse_form_or_json(request)
    if error:
        return error

    result = PaymentService.handle_notification(data)
    return APIResponse.success(data=result, message='Notification received')
