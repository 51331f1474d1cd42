"""
Views for the console endpoints.

Every view talks to the process-wide ``SaffronPlatform`` only.  Rejected
command lines answer 400; commands that were interpreted answer 200 even
when they failed, with the failure carried in the result body.  A
platform that cannot be configured answers 503.
"""
import functools
import json
import logging

from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from saffron_platform.core import SaffronPlatform
from saffron_platform.exceptions import BackendError, CommandRejected, ConfigurationError

logger = logging.getLogger(__name__)


def _method_not_allowed(*allowed: str) -> JsonResponse:
    response = JsonResponse({"ok": False, "error": "Method Not Allowed"}, status=405)
    response["Allow"] = ", ".join(allowed)
    return response


def _backend_failure(error: BackendError) -> JsonResponse:
    return JsonResponse({"message": str(error)}, status=502)


def _body_text(request) -> str:
    return request.body.decode(request.encoding or "utf-8", errors="replace")


def console_view(*methods: str):
    """
    Accept only ``methods`` and hand the view the platform instance.

    Misconfiguration (unknown executor, invalid environment value) is
    reported as JSON 503 instead of Django's HTML error page.
    """
    def decorator(view):
        @csrf_exempt
        @functools.wraps(view)
        def wrapper(request, *args, **kwargs):
            if request.method not in methods:
                return _method_not_allowed(*methods)
            try:
                platform = SaffronPlatform.get_instance()
            except ConfigurationError as e:
                logger.error("Console is misconfigured: %s", e)
                return JsonResponse({"ok": False, "error": str(e)}, status=503)
            return view(request, platform, *args, **kwargs)
        return wrapper
    return decorator


@console_view("POST")
def terminal(request, platform):
    """``POST {"command": "zed ..."}`` → ExecutionResult JSON."""
    try:
        payload = json.loads(request.body or b"{}")
    except (ValueError, UnicodeDecodeError):
        return JsonResponse({"ok": False, "error": "Request body must be JSON"}, status=400)

    command = payload.get("command") if isinstance(payload, dict) else None
    if not isinstance(command, str):
        command = None

    try:
        result = platform.run_command(command)
    except CommandRejected as e:
        logger.warning("Rejected command: %s", e)
        return JsonResponse({"ok": False, "error": str(e)}, status=400)

    return JsonResponse(result.to_dict())


@console_view("GET", "POST")
def schema(request, platform):
    """``GET`` the schema source, or ``POST`` replacement source."""
    if request.method == "GET":
        try:
            text = platform.read_schema()
        except BackendError as e:
            return _backend_failure(e)
        return HttpResponse(text, content_type="text/plain; charset=utf-8")

    try:
        platform.write_schema(_body_text(request))
    except BackendError as e:
        return _backend_failure(e)
    return JsonResponse({"ok": True})


@console_view("GET", "POST")
def schema_namespaces(request, platform):
    """Parsed definitions of the live schema (``GET``) or posted text (``POST``)."""
    if request.method == "GET":
        try:
            namespaces = platform.describe_schema()
        except BackendError as e:
            return _backend_failure(e)
    else:
        namespaces = platform.parse_schema(_body_text(request))

    return JsonResponse({"namespaces": [ns.to_dict() for ns in namespaces]})


@console_view("POST")
def schema_highlight(request, platform):
    markup = platform.highlight_schema(_body_text(request))
    return JsonResponse({"html": markup})
