"""Format checks for NPI, ICD-10-CM and CPT codes."""

from __future__ import annotations

import re

# Issuer prefix the NPI check digit is computed over (ISO 7812 card issuer 80840)
NPI_ISSUER_PREFIX = "80840"

NPI_PATTERN = re.compile(r"^\d{10}$")
# Letter (U is reserved), two digits, optional decimal with up to four more digits
ICD10_PATTERN = re.compile(r"^[A-TV-Z]\d{2}(\.\d{1,4})?$")
CPT_PATTERN = re.compile(r"^\d{5}$")
CPT_WITH_MODIFIER_PATTERN = re.compile(r"^\d{5}(-[A-Z0-9]{2})?$")


def luhn_checksum_valid(digits: str) -> bool:
    """Standard Luhn check over a string of digits, check digit rightmost."""
    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def is_valid_npi(npi: str | None) -> bool:
    """Check a National Provider Identifier.

    An NPI is ten digits whose last digit is a Luhn check digit computed
    over the number prefixed with the 80840 issuer identifier.

    >>> is_valid_npi("1234567893")
    True
    >>> is_valid_npi("1234567890")
    False
    """
    if not npi:
        return False
    npi = npi.strip()
    if not NPI_PATTERN.match(npi):
        return False
    return luhn_checksum_valid(NPI_ISSUER_PREFIX + npi)


def is_valid_icd10(code: str | None) -> bool:
    if not code:
        return False
    return bool(ICD10_PATTERN.match(code.strip().upper()))


def is_valid_cpt(code: str | None, allow_modifier: bool = True) -> bool:
    if not code:
        return False
    pattern = CPT_WITH_MODIFIER_PATTERN if allow_modifier else CPT_PATTERN
    return bool(pattern.match(code.strip().upper()))


def base_cpt_code(code: str | None) -> str | None:
    """Five-digit CPT code with any two-character modifier removed.

    >>> base_cpt_code("27447-rt")
    '27447'
    >>> base_cpt_code("2744") is None
    True
    """
    if not code:
        return None
    code = code.strip().upper()
    if not CPT_WITH_MODIFIER_PATTERN.match(code):
        return None
    return code[:5]
