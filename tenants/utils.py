"""
Tenant code helpers.

Codes are a two-letter prefix taken from the property name followed by a
zero-padded per-property sequence, e.g. "Green Residency" -> GR001, GR002.
"""
import re

from core.constants import TenancyDefaults


def tenant_code_prefix(property_name):
    letters = re.sub(r'[^A-Za-z]', '', property_name or '').upper()
    if len(letters) < TenancyDefaults.TENANT_CODE_PREFIX_LENGTH:
        return TenancyDefaults.TENANT_CODE_PREFIX
    return letters[:TenancyDefaults.TENANT_CODE_PREFIX_LENGTH]


def format_tenant_code(prefix, sequence):
    return f"{prefix}{sequence:0{TenancyDefaults.TENANT_CODE_DIGITS}d}"


def next_tenant_sequence(existing_codes, prefix):
    """One past the highest numeric suffix already used with this prefix"""
    highest = 0
    for code in existing_codes:
        if not code or not code.startswith(prefix):
            continue
        suffix = code[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest + 1
