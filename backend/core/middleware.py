"""
Custom middleware for the IPTV subscription platform.
"""
from django.utils.deprecation import MiddlewareMixin


class SecurityHeadersMiddleware(MiddlewareMixin):
    """Add security headers to API responses."""

    def process_response(self, request, response):
        response['X-Content-Type-Options'] = 'nosniff'
        response['X-Frame-Options'] = 'DENY'
        response['Referrer-Policy'] = 'strict-origin-when-cross-origin'

        # Credential payloads must never be cached by intermediaries
        if request.path.startswith('/api/'):
            response.setdefault('Cache-Control', 'no-store')

        return response
