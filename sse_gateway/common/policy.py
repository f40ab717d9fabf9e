"""
Upstream Policy Check

Validates the requested upstream URL against the host allow-list and resolves
the TLS verification options for the outbound connection.
"""

import logging
import os
import ssl
from typing import Optional, Union
from urllib.parse import SplitResult, urlsplit

from sse_gateway.common.errors import PolicyError, ValidationError
from sse_gateway.config import Settings

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http", "https")


def parse_upstream_url(url: str) -> SplitResult:
    """
    Parse an absolute upstream URL

    Args:
        url: The URL to parse

    Returns:
        SplitResult: The parsed URL

    Raises:
        ValidationError: If the URL is malformed, has no hostname or uses an unsupported scheme
    """
    try:
        parsed = urlsplit(url)
        # Accessing port validates it
        parsed.port
    except ValueError as e:
        raise ValidationError(code="invalid_url", details={"error": str(e)})

    if parsed.scheme.lower() not in SUPPORTED_SCHEMES:
        raise ValidationError(code="invalid_url_scheme", details={"scheme": parsed.scheme})

    if not parsed.hostname:
        raise ValidationError(code="invalid_url_hostname")

    return parsed


def is_host_allowed(hostname: str, allowed_hosts: list[str]) -> bool:
    """
    Check a hostname against the allow-list

    An empty allow-list permits every host.
    """
    if not allowed_hosts:
        return True
    return hostname in allowed_hosts


def check_upstream_url(url: str, settings: Settings) -> SplitResult:
    """
    Validate the upstream URL and apply the host allow-list

    Args:
        url: Requested upstream URL
        settings: Gateway settings

    Returns:
        SplitResult: The parsed URL

    Raises:
        ValidationError: If the URL is invalid
        PolicyError: If the hostname is not on a non-empty allow-list
    """
    parsed = parse_upstream_url(url)
    if not is_host_allowed(parsed.hostname, settings.allowed_hosts):
        logger.warning("Upstream host '%s' is not in the allow-list", parsed.hostname)
        raise PolicyError(details={"hostname": parsed.hostname})
    return parsed


def resolve_tls_verify(
    settings: Settings,
    reject_unauthorized: Optional[bool] = None,
) -> Union[ssl.SSLContext, bool]:
    """
    Resolve the httpx `verify` option for an outbound connection

    Args:
        settings: Gateway settings
        reject_unauthorized: Per-request override of TLS_REJECT_UNAUTHORIZED

    Returns:
        False to skip certificate validation, an SSLContext built from
        TLS_CA_FILE when that file exists, otherwise True (system trust store)
    """
    verify = settings.TLS_REJECT_UNAUTHORIZED if reject_unauthorized is None else reject_unauthorized
    if not verify:
        return False

    ca_file = settings.TLS_CA_FILE
    if ca_file and os.path.exists(ca_file):
        return ssl.create_default_context(cafile=ca_file)
    if ca_file:
        logger.debug("TLS CA file '%s' not found, using system trust store", ca_file)
    return True
