from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from users.catalog import get_product as find_product, list_products as all_products, serialize_product
from users.helpers.response import APIResponse


@csrf_exempt
@require_http_methods(["GET"])
def list_products(request):
    products = all_products(category=request.GET.get('category'))
    return APIResponse.success(data=[serialize_product(p) for p in products])


@csrf_exempt
@require_http_methods(["GET"])
def get_product(request, product_id):
    product = find_product(product_id)
    if product is None:
        return APIResponse.not_found(message='Product not found')
    return APIResponse.success(data=serialize_product(product))
