import json
import logging

from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .services import ActiveOptionService
from .services.cart_transform import cart_transform_run
from .services.renderers import render_product_options

logger = logging.getLogger(__name__)


# =============================================================================
# STOREFRONT
# =============================================================================

@require_http_methods(["GET"])
def render_options_view(request):
    """Render the option controls of a product page as an HTML fragment."""
    shop = request.GET.get('shop')
    if not shop:
        return JsonResponse({'error': 'Shop parameter is required'}, status=400)

    groups = ActiveOptionService.get_definition_groups(shop, request.GET.get('productTags'))
    return HttpResponse(render_product_options(groups), content_type='text/html; charset=utf-8')


# =============================================================================
# CHECKOUT
# =============================================================================

@csrf_exempt
@require_http_methods(["POST"])
def cart_transform_run_view(request):
    """
    Run the cart transform on a cart snapshot.

    Expected payload:
    {
        "cart": {
            "lines": [
                {
                    "id": "gid://shopify/CartLine/1",
                    "quantity": 1,
                    "merchandise": {"id": "gid://shopify/ProductVariant/1"},
                    "cost": {"amountPerQuantity": {"amount": "20.00"}},
                    "attribute": {"value": "{\"Engraving\": \"Ana\"}"},
                    "priceAttribute": {"value": "5.50"}
                }
            ]
        }
    }
    """
    try:
        payload = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Rejected cart transform payload that is not valid JSON")
        return JsonResponse({'error': 'Invalid JSON'}, status=400)

    if not isinstance(payload, dict):
        return JsonResponse({'error': 'Expected a JSON object'}, status=400)

    result = cart_transform_run(payload)
    return JsonResponse(result)
