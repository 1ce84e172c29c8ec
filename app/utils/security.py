"""
Privacy helpers for log lines: client addresses and phone numbers are
never logged in full.
"""

from typing import Optional


def mask_ip_address(ip_address: Optional[str]) -> Optional[str]:
    """
    Mask IP address for display (privacy-friendly).

    For IPv4: 192.168.1.1 → 192.168.x.x
    For IPv6: 2001:0db8::1 → 2001:0db8::x

    Args:
        ip_address: Raw IP address string

    Returns:
        Masked IP address or None if input is None/empty
    """
    if not ip_address or not ip_address.strip():
        return None

    # IPv4 masking
    if '.' in ip_address:
        parts = ip_address.split('.')
        if len(parts) == 4:
            return f"{parts[0]}.{parts[1]}.x.x"

    # IPv6 masking (simplified)
    if ':' in ip_address:
        parts = ip_address.split(':')
        if len(parts) > 2:
            return ':'.join(parts[:2]) + '::x'

    return ip_address


def mask_phone_number(phone: Optional[str]) -> Optional[str]:
    """
    Keep only the last four digits: +919876543210 → ********3210
    """
    if not phone:
        return None
    visible = phone[-4:]
    return "*" * max(len(phone) - 4, 0) + visible
