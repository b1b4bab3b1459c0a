"""Input validators for webftp.

Check connection parameters supplied by callers. Validators return
(is_valid, error_message) and leave reporting to the caller;
parse_flag converts as well, so it raises instead.
"""

import ipaddress
import re
from typing import Any, Optional, Tuple

Validation = Tuple[bool, Optional[str]]

# A single DNS label
_LABEL_PATTERN = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")

PORT_RANGE = (1, 65535)
TIMEOUT_RANGE = (5, 300)

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


def validate_ip_address(ip: str) -> Validation:
    """Validate an IPv4 or IPv6 address."""
    try:
        ipaddress.ip_address((ip or "").strip())
    except ValueError:
        return False, f"Invalid IP address format: {ip}"
    return True, None


def validate_hostname(hostname: str) -> Validation:
    """Validate a DNS name such as ftp.example.com (a trailing dot is allowed)."""
    name = (hostname or "").strip().rstrip(".")
    if name and len(name) <= 253 and all(_LABEL_PATTERN.match(label) for label in name.split(".")):
        return True, None
    return False, f"Invalid hostname format: {hostname}"


def validate_host(host: str) -> Validation:
    """
    Validate an FTP host given as an IP address or a hostname.

    Args:
        host: Host string as supplied by the caller

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not host or not host.strip():
        return False, "Host is required"
    if validate_ip_address(host)[0] or validate_hostname(host)[0]:
        return True, None
    return False, f"Invalid host: {host.strip()}. Must be a valid IP address or hostname."


def _validate_int_range(value: Any, label: str, bounds: Tuple[int, int], unit: str = "") -> Validation:
    try:
        number = int(value)
    except (ValueError, TypeError):
        return False, f"{label} must be a number"
    low, high = bounds
    if not low <= number <= high:
        return False, f"{label} must be between {low} and {high}{unit}, got {number}"
    return True, None


def validate_port(port: Any) -> Validation:
    """Validate a TCP port given as an int or a numeric string."""
    return _validate_int_range(port, "Port", PORT_RANGE)


def validate_timeout(timeout: Any) -> Validation:
    """Validate a timeout in seconds given as an int or a numeric string."""
    return _validate_int_range(timeout, "Timeout", TIMEOUT_RANGE, unit=" seconds")


def parse_flag(value: Any, default: bool = False) -> bool:
    """
    Interpret a request parameter as a boolean.

    Args:
        value: bool, None, or a string such as "1", "true", "off"
        default: Returned when value is None

    Returns:
        Parsed boolean

    Raises:
        ValueError: If the string is not a recognized flag value
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid flag value: {value}")
