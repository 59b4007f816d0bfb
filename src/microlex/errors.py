"""Error types with formatted pattern context."""

from __future__ import annotations


class RuleError(Exception):
    """Raised when a rule or rule table is misconfigured.

    Always raised while building rules and tables, never while scanning.
    """

    def __init__(
        self,
        message: str,
        pattern: str | None = None,
        position: int | None = None,
        rule_name: str = "",
    ) -> None:
        self.message = message
        self.pattern = pattern
        self.position = position
        self.rule_name = rule_name
        super().__init__(self.format())

    def format(self) -> str:
        label = f"rule '{self.rule_name}': " if self.rule_name else ""
        result = f"error: {label}{self.message}"
        if self.pattern is None:
            return result

        # Locate the offending line of (possibly verbose, multi-line) patterns
        lines = self.pattern.split("\n")
        line_idx = 0
        col = 0
        if self.position is not None:
            consumed = 0
            for i, line in enumerate(lines):
                if self.position <= consumed + len(line):
                    line_idx = i
                    col = self.position - consumed
                    break
                consumed += len(line) + 1

        line_num = str(line_idx + 1)
        gutter_width = len(line_num) + 1
        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        result += (
            f"\n{' ' * gutter_width}--> pattern:{line_idx + 1}:{col + 1}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {lines[line_idx]}"
        )
        if self.position is not None:
            result += f"\n{blank_gutter} {' ' * col}^"
        return result


class RefinementError(Exception):
    """Raised in validate mode when a refinement loses or invents text."""

    def __init__(
        self,
        rule_name: str,
        expected: str,
        actual: str,
        reason: str = "does not reproduce its match",
    ) -> None:
        self.rule_name = rule_name or "<unnamed>"
        self.reason = reason
        self.expected = expected
        self.actual = actual
        super().__init__(self.format())

    def format(self) -> str:
        return (
            f"error: refinement of rule '{self.rule_name}' {self.reason}\n"
            f"  expected: {self.expected!r}\n"
            f"    actual: {self.actual!r}"
        )


class UnknownLanguageError(Exception):
    """Raised when a language name or alias has no rule table."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(self.format())

    def format(self) -> str:
        return f"error: unknown language '{self.name}' (available: {', '.join(self.available)})"
