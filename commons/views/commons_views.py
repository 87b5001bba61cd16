from django.db import DatabaseError, connection
from django.http import JsonResponse


def liveness(request):
    return JsonResponse({"ok": True})


def readiness(request):
    try:
        with connection.cursor() as cur:
            cur.execute("SELECT 1")
            cur.fetchone()
        return JsonResponse({"ok": True})
    except DatabaseError as e:
        return JsonResponse({"ok": False, "error": str(e)}, status=503)
