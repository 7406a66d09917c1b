"""Shared utility functions for the claims validation engine."""

from .code_formats import base_cpt_code, is_valid_cpt, is_valid_icd10, is_valid_npi
from .date_parser import parse_flexible_date

__all__ = ["base_cpt_code", "is_valid_cpt", "is_valid_icd10", "is_valid_npi", "parse_flexible_date"]
