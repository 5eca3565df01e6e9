"""Rule-based secret redaction for exported text.

Rules run in order, each over the output of the previous one. This is
pattern matching only; it catches credential-shaped strings, not secrets
in general.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from dataclasses import field


@dataclass(frozen=True)
class RedactionRule:
    """One pattern/placeholder pair.

    Attributes:
        name: Human-readable kind of secret
        pattern: Compiled matcher
        replacement: Replacement template (may reference groups)
    """

    name: str
    pattern: re.Pattern[str]
    replacement: str

    def apply(self, text: str) -> tuple[str, int]:
        """Return the redacted text and the number of matches replaced."""
        return self.pattern.subn(self.replacement, text)


@dataclass(frozen=True)
class BlockRedactionRule(RedactionRule):
    """Rule for BEGIN/END delimited blocks.

    Only the text up to the end of the last END marker is searched, so a
    BEGIN marker with no END after it never scans the rest of the input.

    Attributes:
        end_pattern: Matcher for the closing marker alone
    """

    end_pattern: re.Pattern[str]

    def apply(self, text: str) -> tuple[str, int]:
        cut = max((m.end() for m in self.end_pattern.finditer(text)), default=0)
        if not cut:
            return text, 0
        head, count = self.pattern.subn(self.replacement, text[:cut])
        return head + text[cut:], count


@dataclass
class ScrubResult:
    clean_text: str
    redacted_count: int = 0
    counts_by_rule: dict[str, int] = field(default_factory=dict)


SECRET_PLACEHOLDER = "<REDACTED_SECRET>"

_PEM_END = r"-----END (?:[A-Z0-9]+ )*PRIVATE KEY-----"

DEFAULT_RULES: tuple[RedactionRule, ...] = (
    RedactionRule(
        name="AWS API Key",
        pattern=re.compile(r"(?:A3T[A-Z0-9]|AKIA|AGPA|AIDA|AROA|AIPA|ANPA|ANVA|ASIA)[A-Z0-9]{16}"),
        replacement="<REDACTED_AWS_KEY>",
    ),
    BlockRedactionRule(
        name="Private Key",
        pattern=re.compile(r"-----BEGIN (?:[A-Z0-9]+ )*PRIVATE KEY-----[\s\S]*?" + _PEM_END),
        replacement="<REDACTED_PRIVATE_KEY>",
        end_pattern=re.compile(_PEM_END),
    ),
    RedactionRule(
        name="Slack Token",
        pattern=re.compile(r"xox[baprs]-[0-9a-zA-Z]{10,48}(?:-[0-9a-zA-Z]+)*"),
        replacement="<REDACTED_SLACK_TOKEN>",
    ),
    RedactionRule(
        name="Secret Assignment",
        # Whole identifier containing a key word, separator with its surrounding
        # whitespace, quote, value, same quote. Matching starts only at identifier
        # starts and the identifier is consumed possessively.
        pattern=re.compile(
            r"(?<![A-Za-z0-9_])(?=[A-Za-z0-9_]*?(?:password|secret|token|key|pwd|api_key))"
            r"([A-Za-z0-9_]++)(\s*[:=]\s*)([\"'])(.*?)(\3)",
            re.IGNORECASE,
        ),
        replacement=rf"\1\2\3{SECRET_PLACEHOLDER}\5",
    ),
)


def scrub(text: str, rules: tuple[RedactionRule, ...] = DEFAULT_RULES) -> ScrubResult:
    """Redact secrets from ``text``.

    Args:
        text: Text to clean
        rules: Rules applied in order

    Returns:
        ScrubResult with the cleaned text and the total number of redactions
    """
    result = ScrubResult(clean_text=text)
    for rule in rules:
        result.clean_text, count = rule.apply(result.clean_text)
        if count:
            result.redacted_count += count
            result.counts_by_rule[rule.name] = result.counts_by_rule.get(rule.name, 0) + count
    return result
