"""检查配置模块。

提供默认的语法测试表、Lint 子检查、包含路径与忽略规则，
以及在扫描指令时使用的可变构建器 `ConfigBuilder`。
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple


DIRECTIVE_PREFIX = "## efm"

LINT_TEST = "lint"
LINT_MODULE = "B::Lint"
STRICT_OO_MODULE = "B::Lint::StrictOO"
STRICT_OO_CHECK = "oo"

DEFAULT_SYNTAX_TESTS: Dict[str, str] = {
    "indirect": "-indirect=fatal",
    LINT_TEST: "O=Lint",
    "multidimensional": "-multidimensional",
    "bareword": "-bareword::filehandles",
    "unused": "warnings::unused",
    "circular": "-circular::require",
    "autovivification": "-autovivification=fetch,exists,delete",
}

DEFAULT_LINT_CHECKS: Tuple[str, ...] = (
    "bare-subs",
    "context",
    "dollar-underscore",
    "implicit-read",
    "implicit-write",
    "magic-diamond",
    STRICT_OO_CHECK,
    "private-names",
    "regexp-variables",
    "undefined-subs",
)

DEFAULT_INCLUDE_PATHS: Tuple[str, ...] = ("lib", "t/lib")

DEFAULT_SKIP_ERRORS: Tuple[str, ...] = (
    "used only once: possible typo",
    "BEGIN failed--compilation aborted",
)


@dataclass(slots=True, frozen=True)
class CheckConfig:
    """单次运行的检查配置，构建完成后不可修改。"""

    debug: int = 0
    syntax_tests: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_SYNTAX_TESTS))
    lint_checks: Mapping[str, bool] = field(
        default_factory=lambda: {name: True for name in DEFAULT_LINT_CHECKS}
    )
    include_paths: Tuple[str, ...] = DEFAULT_INCLUDE_PATHS
    modules: Tuple[str, ...] = ()
    skip_errors: Tuple[str, ...] = DEFAULT_SKIP_ERRORS

    def __post_init__(self) -> None:
        # 映射字段复制后只读，快照之间互不影响
        object.__setattr__(self, "syntax_tests", MappingProxyType(dict(self.syntax_tests)))
        object.__setattr__(self, "lint_checks", MappingProxyType(dict(self.lint_checks)))

    def to_builder(self) -> "ConfigBuilder":
        return ConfigBuilder(
            debug=self.debug,
            syntax_tests=dict(self.syntax_tests),
            lint_checks=dict(self.lint_checks),
            include_paths=list(self.include_paths),
            modules=list(self.modules),
            skip_errors=list(self.skip_errors),
        )

    def enabled_lint_checks(self) -> List[str]:
        return sorted(name for name, enabled in self.lint_checks.items() if enabled)


@dataclass(slots=True)
class ConfigBuilder:
    """扫描指令期间使用的可变配置。"""

    debug: int = 0
    syntax_tests: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SYNTAX_TESTS))
    lint_checks: Dict[str, bool] = field(
        default_factory=lambda: {name: True for name in DEFAULT_LINT_CHECKS}
    )
    include_paths: List[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE_PATHS))
    modules: List[str] = field(default_factory=list)
    skip_errors: List[str] = field(default_factory=lambda: list(DEFAULT_SKIP_ERRORS))

    def skip_all(self) -> None:
        self.syntax_tests.clear()

    def skip(self, name: str) -> None:
        self.syntax_tests.pop(name, None)
        if name in self.lint_checks:
            self.lint_checks[name] = False

    def build(self) -> CheckConfig:
        return CheckConfig(
            debug=self.debug,
            syntax_tests=dict(self.syntax_tests),
            lint_checks=dict(self.lint_checks),
            include_paths=tuple(self.include_paths),
            modules=tuple(self.modules),
            skip_errors=tuple(self.skip_errors),
        )


@dataclass(slots=True, frozen=True)
class ToolPaths:
    """外部工具位置，可通过环境变量覆盖。"""

    perl: str = "perl"
    perldoc: str = "perldoc"

    @classmethod
    def from_env(cls) -> "ToolPaths":
        return cls(
            perl=os.getenv("EFM_PERL_INTERPRETER") or "perl",
            perldoc=os.getenv("EFM_PERL_PERLDOC") or "perldoc",
        )


DEFAULT_CONFIG = CheckConfig()

__all__ = [
    "CheckConfig",
    "ConfigBuilder",
    "DEFAULT_CONFIG",
    "DEFAULT_INCLUDE_PATHS",
    "DEFAULT_LINT_CHECKS",
    "DEFAULT_SKIP_ERRORS",
    "DEFAULT_SYNTAX_TESTS",
    "DIRECTIVE_PREFIX",
    "LINT_MODULE",
    "LINT_TEST",
    "STRICT_OO_CHECK",
    "STRICT_OO_MODULE",
    "ToolPaths",
]
