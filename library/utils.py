import os
import ssl

from django.conf import settings

CERTIFICATE_NOTE = (
    'You need to set REQUESTS_CA_BUNDLE and SSL_CERT_FILE to the path of the pem file.'
    ' If you need one, <a href="https://curl.se/docs/caextract.html">download the certificate</a>'
)

DEV_SERVER_NOTE = (
    'You are using the development server, static assets of the api index and the admin'
    ' are only served when DEBUG is enabled and may return a 404 Not Found'
)


def has_pem_certificate() -> bool:
    """
    True when both the requests bundle and the OpenSSL default cafile are set,
    the same pair of settings the HTTP client demo needs to verify TLS peers.
    """
    bundle = os.environ.get('REQUESTS_CA_BUNDLE', '')
    cafile = ssl.get_default_verify_paths().cafile
    return bool(bundle and os.path.isfile(bundle) and cafile)


def is_dev_server(request) -> bool:
    software = request.META.get('SERVER_SOFTWARE', '')
    signatures = getattr(settings, 'LIBRARY_DEV_SERVER_SIGNATURES', ('WSGIServer',))
    return any(signature in software for signature in signatures if signature)


def with_note(uri, note):
    return {'uri': uri, 'note': note}
