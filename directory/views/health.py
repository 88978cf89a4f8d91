import requests
from django.conf import settings
from django.http import JsonResponse


def healthz(request):
    # any HTTP answer means the backend is up; only network failures count
    try:
        resp = requests.get(settings.API_URL, timeout=min(settings.API_TIMEOUT, 3))
        return JsonResponse({'ok': True, 'api': True, 'api_status': resp.status_code})
    except requests.RequestException as e:
        return JsonResponse({'ok': False, 'api': False, 'error': str(e)}, status=503)
