from django.contrib.auth.decorators import login_required
from django.http import HttpResponse, JsonResponse
from django.middleware.csrf import get_token
from django.shortcuts import render
from django.urls import reverse

from .services import fetch_demo_payload
from .utils import (
    CERTIFICATE_NOTE,
    DEV_SERVER_NOTE,
    has_pem_certificate,
    is_dev_server,
    with_note,
)

# Label shown in the menu, route name, route kwargs
DEMO_ROUTES = [
    ('Simple controller', 'simple', None),
    ('Hello controller with template', 'hello_world', {'name': 'world'}),
    ('HTTP client demo', 'http_client_demo', None),
    ('Secured page with standard login', 'secured_page', None),
    ('Csrf token generation', 'csrf_token', None),
    ('User login check for js app', 'is_logged_in', None),
    ('Rest api', 'api_entrypoint', None),
    ('Admin', 'admin:index', None),
]


def demo_routes(request):
    """
    Menu entries: label -> url, or label -> {'uri', 'note'} when the
    environment makes the route unreliable.
    """
    routes = {
        label: reverse(name, kwargs=kwargs)
        for label, name, kwargs in DEMO_ROUTES
    }

    if not has_pem_certificate():
        label = 'HTTP client demo'
        routes[label] = with_note(routes[label], CERTIFICATE_NOTE)

    if is_dev_server(request):
        for label in ('Rest api', 'Admin'):
            routes[label] = with_note(routes[label], DEV_SERVER_NOTE)

    return routes


def index_view(request):
    """Homepage - lists every demo route"""
    return render(request, 'library/menu.html', {
        'routes': demo_routes(request),
        'is_dev_server': is_dev_server(request),
    })


def simple_view(request):
    return HttpResponse('Hello world, this is a simple controller.', content_type='text/plain')


def hello_view(request, name):
    return render(request, 'library/hello.html', {'name': name})


def http_client_view(request):
    """Calls a remote JSON api with the shared requests session"""
    payload = fetch_demo_payload()
    if payload is None:
        return JsonResponse({'error': 'Remote api could not be reached'}, status=502)
    return JsonResponse({'payload': payload})


@login_required
def secured_page_view(request):
    return render(request, 'library/secured.html')


def csrf_token_view(request):
    return JsonResponse({'token': get_token(request)})


def is_logged_in_view(request):
    user = request.user
    return JsonResponse({
        'isLoggedIn': user.is_authenticated,
        'username': user.get_username() if user.is_authenticated else None,
    })
