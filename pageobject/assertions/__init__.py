# pageobject/assertions/__init__.py
"""
Assertions package
------------------
The assertion runner and the bundled assertion definitions.
"""

from .base import AssertionOutcome, run_assertion, unpack_assertion_args
from .url_matches import UrlMatches

__all__ = [
    "AssertionOutcome",
    "run_assertion",
    "unpack_assertion_args",
    "UrlMatches",
]
