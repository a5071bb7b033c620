# apps/core/responses.py

"""
Toast-style feedback for the three kinds of requests the app serves

- HTMX requests get an ``HX-Trigger: showToast`` client event
- JSON/AJAX requests get ``{"success": ..., "message"|"error": ...}``
- plain form posts get a Django message and a redirect
"""

from django.contrib import messages
from django.http import HttpResponse, JsonResponse
from django.shortcuts import redirect
from django_htmx.http import trigger_client_event


def wants_json(request):
    accept = request.headers.get('Accept', '')
    content_type = request.headers.get('Content-Type', '')
    return 'application/json' in accept or 'application/json' in content_type


def toast(response, message, level='success'):
    """Attaches a showToast client event to an HTMX response"""
    return trigger_client_event(response, 'showToast', {'level': level, 'message': message})


def success_response(request, message, redirect_to=None, data=None, response=None):
    if request.htmx:
        return toast(response or HttpResponse(status=204), message)

    if wants_json(request) or redirect_to is None:
        payload = {'success': True, 'message': message}
        payload.update(data or {})
        return JsonResponse(payload)

    messages.success(request, message)
    return redirect(redirect_to)


def error_response(request, error, redirect_to=None):
    """Renders a BoardActionError for the kind of request that caused it"""
    if request.htmx:
        return toast(HttpResponse(status=error.status_code), error.message, level='error')

    if wants_json(request) or redirect_to is None:
        return JsonResponse(error.as_dict(), status=error.status_code)

    messages.error(request, error.message)
    return redirect(redirect_to)
