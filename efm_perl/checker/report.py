"""诊断行的分类与过滤。"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence


logger = logging.getLogger(__name__)


class Verdict(str, Enum):
    IRRELEVANT = "irrelevant"
    SUPPRESSED = "suppressed"
    REPORTED = "reported"


@dataclass(slots=True, frozen=True)
class Diagnostic:
    text: str
    verdict: Verdict
    pattern: Optional[str] = None


class SkipRules:
    """一组忽略规则，按正则表达式匹配诊断行。"""

    def __init__(self, patterns: Iterable[str]):
        self.patterns: List[str] = list(patterns)
        self._compiled: List[re.Pattern[str]] = [_compile(p) for p in self.patterns]

    def match(self, line: str) -> Optional[str]:
        for source, regex in zip(self.patterns, self._compiled):
            if regex.search(line):
                return source
        return None


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        logger.warning("忽略规则 `%s` 不是合法的正则表达式 (%s)，按普通文本匹配", pattern, exc)
        return re.compile(re.escape(pattern))


def classify(line: str, source: str, rules: SkipRules) -> Diagnostic:
    if source not in line:
        return Diagnostic(line, Verdict.IRRELEVANT)
    pattern = rules.match(line)
    if pattern is not None:
        return Diagnostic(line, Verdict.SUPPRESSED, pattern)
    return Diagnostic(line, Verdict.REPORTED)


class Report:
    """一次检查的结果。"""

    def __init__(self, source: str, command: Sequence[str], diagnostics: Iterable[Diagnostic]):
        self.source = source
        self.command: List[str] = list(command)
        self.diagnostics: List[Diagnostic] = list(diagnostics)

    @property
    def reported(self) -> List[str]:
        return [d.text for d in self.diagnostics if d.verdict is Verdict.REPORTED]

    @property
    def suppressed(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.verdict is Verdict.SUPPRESSED]

    def verdict_summary(self) -> Dict[str, int]:
        summary: Dict[str, int] = {}
        for diagnostic in self.diagnostics:
            key = diagnostic.verdict.value
            summary[key] = summary.get(key, 0) + 1
        return summary

    def format_text(self) -> str:
        return "\n".join(self.reported)


def filter_diagnostics(stderr: str, source: str, patterns: Iterable[str]) -> List[Diagnostic]:
    rules = SkipRules(patterns)
    return [classify(line, source, rules) for line in stderr.splitlines()]


__all__ = [
    "Diagnostic",
    "Report",
    "SkipRules",
    "Verdict",
    "classify",
    "filter_diagnostics",
]
