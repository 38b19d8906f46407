"""Deterministic cleanup of step-by-step solutions returned by the model."""

import re

_FRAC = re.compile(r"\\[dt]?frac\s*\{([^{}]*)\}\s*\{([^{}]*)\}")
_SQRT = re.compile(r"\\sqrt\s*\{([^{}]*)\}")
_SYMBOLS = {
    "times": "*",
    "cdot": "*",
    "div": "/",
    "pm": "+/-",
    "le": "<=",
    "leq": "<=",
    "ge": ">=",
    "geq": ">=",
    "neq": "!=",
    "approx": "~",
}
_SYMBOL_COMMAND = re.compile(r"\\(" + "|".join(sorted(_SYMBOLS, key=len, reverse=True)) + r")(?![A-Za-z])")
_MATH_DELIMITERS = re.compile(r"\\[()\[\]]")
_COMMAND = re.compile(r"\\[A-Za-z]+\*?|\\.")
_MARKDOWN = re.compile(r"\*\*|__|`+|^#+\s*", re.MULTILINE)
_PAREN_GROUP = re.compile(r"\(([^()]*)\)")
_WHITESPACE = re.compile(r"\s+")
_STEP_MARKER = re.compile(r"\s*(?<!\w)(\d{1,2})\.(?=\s)")


def strip_markup(text: str) -> str:
    """Replace LaTeX and markdown markup with plain arithmetic text."""
    text = _MATH_DELIMITERS.sub("", text)
    text = text.replace("$", "")
    # Innermost fractions first; nested ones resolve on later passes.
    previous = None
    while previous != text:
        previous = text
        text = _FRAC.sub(r"(\1)/(\2)", text)
        text = _SQRT.sub(r"sqrt(\1)", text)
    text = _SYMBOL_COMMAND.sub(lambda m: f" {_SYMBOLS[m.group(1)]} ", text)
    text = _COMMAND.sub("", text)
    text = text.replace("{", "").replace("}", "")
    return _MARKDOWN.sub("", text)


def collapse_parenthesized(text: str) -> str:
    """Collapse whitespace inside each innermost parenthesized group."""
    return _PAREN_GROUP.sub(lambda m: "(" + _WHITESPACE.sub(" ", m.group(1)).strip() + ")", text)


def format_steps(raw: str) -> str:
    """Normalize a raw walkthrough into plain text with a blank line before each numbered step."""
    text = strip_markup(raw)
    text = collapse_parenthesized(text)
    text = _WHITESPACE.sub(" ", text)
    return break_before_steps(text).strip()


def break_before_steps(text: str) -> str:
    """Insert a blank line before `1.`, `2.`, ... in sequence.

    A number only counts as a marker when it is the next expected step, so
    results such as "to get 4." stay inline.
    """
    expected = 1

    def _replace(match: re.Match) -> str:
        nonlocal expected
        if int(match.group(1)) != expected:
            return match.group(0)
        expected += 1
        return f"\n\n{match.group(1)}."

    return _STEP_MARKER.sub(_replace, text)
