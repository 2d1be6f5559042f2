"""GSTIN / PAN format checks"""
import re

GSTIN_RE = re.compile(r'^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$')
PAN_RE = re.compile(r'^[A-Z]{5}[0-9]{4}[A-Z]{1}$')


def is_valid_gstin(gstin: str) -> bool:
    return bool(GSTIN_RE.match(gstin or ''))


def is_valid_pan(pan: str) -> bool:
    return bool(PAN_RE.match(pan or ''))
