from django.http import JsonResponse
from django.views.decorators.http import require_GET

from care.services.health import GREETING, probe_database


@require_GET
def api_test(request):
    """Connectivity smoke test for the front-end."""
    return JsonResponse({'message': GREETING})


@require_GET
def healthz(request):
    ok, error = probe_database()
    if ok:
        return JsonResponse({'ok': True, 'db': True})
    return JsonResponse({'ok': False, 'db': False, 'error': error}, status=500)
