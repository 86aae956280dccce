"""
Custom validators for the IPTV subscription platform.
"""
import re

from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

MAC_ADDRESS_RE = re.compile(r'^([0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}$')


def is_valid_mac_address(value):
    return bool(value) and MAC_ADDRESS_RE.match(value) is not None


def validate_mac_address(value):
    """Validate a colon or dash separated MAC address, e.g. 00:1A:79:AA:BB:CC."""
    if not is_valid_mac_address(value):
        raise ValidationError(
            _('Enter a valid MAC address (e.g. 00:1A:79:XX:XX:XX).'),
            code='invalid_mac_address'
        )
    return value


def validate_connections(value):
    """Validate a simultaneous connection count."""
    if value is None or value < 1 or value > settings.MAX_CONNECTIONS:
        raise ValidationError(
            _('Connections must be between 1 and %(max)s.'),
            code='invalid_connections',
            params={'max': settings.MAX_CONNECTIONS},
        )
    return value


def validate_connection_range(min_connections, max_connections):
    """Validate a min/max connection window on a payment option."""
    validate_connections(min_connections)
    validate_connections(max_connections)
    if min_connections > max_connections:
        raise ValidationError(
            _('Minimum connections cannot exceed maximum connections.'),
            code='invalid_connection_range'
        )
