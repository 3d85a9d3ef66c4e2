"""
Catalog Views
Public service menu used by the booking page.
"""
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from .models import Service


@require_http_methods(["GET"])
def get_services_json(request):
    """Return active services (id, name, duration, price range) as JSON"""
    services = Service.objects.active()
    return JsonResponse([s.as_dict() for s in services], safe=False)


@require_http_methods(["GET"])
def get_service_details(request, service_id):
    try:
        service = Service.objects.get(id=service_id)
    except Service.DoesNotExist:
        return JsonResponse({
            'success': False,
            'message': 'Service not found'
        }, status=404)

    return JsonResponse({
        'success': True,
        'service': service.as_dict(),
    })
