# pageobject/assertions/url_matches.py
from __future__ import annotations

import re
from typing import Any, Optional, Union


class UrlMatches:
    """
    Checks if the current url matches a regular expression.

    Example:
        page.assert_.url_matches(r"^https")
        page.assert_.not_.url_matches(r"^http:")

    Args:
        regex_expression: pattern (string or compiled) searched in the URL
        msg: optional message; `%s` is replaced by the quoted pattern
    """

    def __init__(self, regex_expression: Union[str, re.Pattern], msg: Optional[str] = None) -> None:
        self.regex_expression = regex_expression
        self.msg = msg
        self.negate = False
        self.api: Any = None

    @property
    def _pattern_text(self) -> str:
        if isinstance(self.regex_expression, re.Pattern):
            return self.regex_expression.pattern
        return str(self.regex_expression)

    def expected(self) -> str:
        if self.negate:
            return f"does not matches '{self._pattern_text}'"
        return f"matches '{self._pattern_text}'"

    def format_message(self) -> tuple[str, list[str]]:
        if self.msg:
            message = self.msg
        elif self.negate:
            message = "Testing if the URL doesn't matches %s"
        else:
            message = "Testing if the URL matches %s"
        return message, [f"'{self._pattern_text}'"]

    def evaluate(self, value: str) -> bool:
        regex = self.regex_expression
        if not isinstance(regex, re.Pattern):
            regex = re.compile(regex)
        return regex.search(value) is not None

    def value(self, result: Optional[dict] = None) -> str:
        result = result or {}
        return result.get("value") or ""

    def command(self, callback) -> None:
        callback({"value": self.api.url()})
