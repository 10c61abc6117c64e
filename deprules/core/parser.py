"""Dependency declaration parser.

Turns declaration strings as written in a spec file, or as printed by
``rpm -q --requires``-style queries prefixed with their tag, into
:class:`DependencyRule` objects:

- ``Requires: foo``
- ``Requires: foo-libs(x86-64) = 1.2-3.fc40``
- ``Provides: libfoo.so.1()(64bit)``
- ``Obsoletes: foo-old < 2:1.0``
- ``Recommends: (foo-doc if bar)`` (rich dependencies are kept whole)

Typical usage::

    from deprules.core.parser import DepRuleParser

    parser = DepRuleParser()
    rule = parser.parse_line("Requires: foo >= 1.0")
    rules = parser.parse_lines(["Provides: foo = 1.0-1", "# comment"])
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from deprules.exceptions import ParseError
from deprules.models import DependencyRule, Operator, RuleKind
from deprules.utils import get_logger

# Subject, optional operator and version. Operators are matched longest first.
_SIMPLE_RULE = re.compile(
    r"^(?P<subject>[^\s<>=]+)"
    r"(?:\s*(?P<operator><=|>=|==|=|<|>)\s*(?P<version>\S+))?$"
)

_TAG_SEPARATOR = ":"


class DepRuleParser:
    """Stateless parser for tagged dependency declarations.

    Example::

        >>> parser = DepRuleParser()
        >>> rule = parser.parse_line("Requires: foo-libs = 1.0-1")
        >>> rule.kind, rule.requirement, rule.operator, rule.version
        (<RuleKind.REQUIRES: 'Requires'>, 'foo-libs', <Operator.EQUAL: '='>, '1.0-1')
    """

    def __init__(self) -> None:
        self.logger = get_logger("parser")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse_lines(
        self,
        lines: Sequence[str],
        source_file_path: Optional[str] = None,
    ) -> List[DependencyRule]:
        """Parse a sequence of declarations, preserving their order.

        Blank entries and ``#`` comments are skipped.

        Args:
            lines: Declaration strings.
            source_file_path: Optional file path for error messages.

        Returns:
            Parsed rules in declaration order.

        Raises:
            ParseError: A declaration is malformed.
        """
        rules: List[DependencyRule] = []

        for line_number, line_text in enumerate(lines, start=1):
            rule = self.parse_line(line_text, line_number, source_file_path)
            if rule is not None:
                rules.append(rule)

        self.logger.debug(
            "Parsed %d dependency rule(s)%s",
            len(rules),
            f" from {source_file_path}" if source_file_path else "",
        )
        return rules

    def parse_line(
        self,
        line_text: str,
        line_number: Optional[int] = None,
        source_file_path: Optional[str] = None,
    ) -> Optional[DependencyRule]:
        """Parse a single declaration.

        Args:
            line_text: Declaration such as ``Requires: foo >= 1.0``.
            line_number: Position of the declaration, for error messages.
            source_file_path: Origin of the declaration, for error messages.

        Returns:
            The parsed rule, or ``None`` for blank lines and comments.

        Raises:
            ParseError: The declaration has no tag, no subject, or a
                malformed version comparison.
        """
        if not isinstance(line_text, str):
            raise ParseError(
                "Dependency declaration must be a string, "
                f"got {type(line_text).__name__}",
                line_number=line_number,
                file_path=source_file_path,
            )

        stripped = line_text.strip()

        if not stripped or stripped.startswith("#"):
            return None

        tag, separator, body = stripped.partition(_TAG_SEPARATOR)
        if not separator or not tag.strip() or " " in tag.strip():
            raise ParseError(
                "Missing dependency tag (expected 'Tag: subject')",
                line_number=line_number,
                line_content=line_text,
                file_path=source_file_path,
            )

        kind = RuleKind.from_tag(tag)
        if kind is RuleKind.OTHER:
            self.logger.debug("Unclassified dependency tag %r", tag.strip())

        body = body.strip()
        if not body:
            raise ParseError(
                "Missing dependency subject",
                line_number=line_number,
                line_content=line_text,
                file_path=source_file_path,
            )

        if body.startswith("("):
            requirement, operator, version = self._parse_rich(
                body, line_number, line_text, source_file_path
            )
        else:
            requirement, operator, version = self._parse_simple(
                body, line_number, line_text, source_file_path
            )

        return DependencyRule(
            kind=kind,
            requirement=requirement,
            operator=operator,
            version=version,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _parse_simple(
        self,
        body: str,
        line_number: Optional[int],
        line_text: str,
        source_file_path: Optional[str],
    ) -> Tuple[str, Operator, Optional[str]]:
        match = _SIMPLE_RULE.match(body)
        if not match:
            raise ParseError(
                f"Invalid dependency declaration: {body}",
                line_number=line_number,
                line_content=line_text,
                file_path=source_file_path,
            )

        symbol = match.group("operator")
        if symbol is None:
            return match.group("subject"), Operator.NONE, None

        return (
            match.group("subject"),
            Operator.from_symbol(symbol),
            match.group("version"),
        )

    def _parse_rich(
        self,
        body: str,
        line_number: Optional[int],
        line_text: str,
        source_file_path: Optional[str],
    ) -> Tuple[str, Operator, Optional[str]]:
        """Keep a boolean dependency such as ``(a or b)`` as one subject."""
        depth = 0

        for index, char in enumerate(body):
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0:
                    if body[index + 1 :].strip():
                        break
                    return body, Operator.NONE, None

        raise ParseError(
            f"Unbalanced rich dependency: {body}",
            line_number=line_number,
            line_content=line_text,
            file_path=source_file_path,
        )
