"""文件内 `## efm` 指令的解析与应用。

指令行必须从第一列开始，形如::

    ## efm skip indirect unused
    ## efm skip_error Subroutine \\w+ redefined
    ## efm modules Foo::Bar
    ## efm includes ../lib

每一行先被拆成 (关键字, 其余部分)，再按固定的指令类型分派。
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from ..config import DIRECTIVE_PREFIX, ConfigBuilder


logger = logging.getLogger(__name__)

_DIRECTIVE_RE = re.compile(r"^" + re.escape(DIRECTIVE_PREFIX) + r"\s+(\S+)(?:\s+(.*))?$")


class DirectiveKind(str, Enum):
    DEBUG = "debug"
    SKIP_ALL = "skip-all"
    SKIP = "skip"
    SKIP_ERROR = "skip-error"
    MODULES = "modules"
    INCLUDES = "includes"


@dataclass(slots=True, frozen=True)
class Directive:
    kind: DirectiveKind
    args: Tuple[str, ...] = ()
    line: int = 0


def split_directive(line: str) -> Optional[Tuple[str, str]]:
    """返回 (关键字, 其余部分)；不是指令行时返回 None。"""

    match = _DIRECTIVE_RE.match(line.rstrip("\r\n"))
    if not match:
        return None
    return match.group(1), match.group(2) or ""


def parse_directive(line: str, lineno: int = 0) -> Optional[Directive]:
    parts = split_directive(line)
    if parts is None:
        return None

    keyword, remainder = parts
    if keyword == "debug":
        return Directive(DirectiveKind.DEBUG, (), lineno)

    if keyword == "skip":
        names = tuple(remainder.split())
        if "all" in names:
            return Directive(DirectiveKind.SKIP_ALL, (), lineno)
        return Directive(DirectiveKind.SKIP, names, lineno)

    if keyword == "skip_error":
        # 整行剩余文本即为一个规则，保留其中的空格
        return Directive(DirectiveKind.SKIP_ERROR, (remainder,), lineno)

    if keyword == "modules":
        return Directive(DirectiveKind.MODULES, tuple(remainder.split()), lineno)

    if keyword == "includes":
        return Directive(DirectiveKind.INCLUDES, tuple(remainder.split()), lineno)

    logger.debug("第 %d 行: 忽略未知指令 `%s`", lineno, keyword)
    return None


def scan_directives(text: str) -> List[Directive]:
    """从源码文本中提取全部指令，不修改任何配置。"""

    directives: List[Directive] = []
    for lineno, line in enumerate(text.split("\n"), start=1):
        directive = parse_directive(line, lineno)
        if directive is not None:
            directives.append(directive)
    return directives


def apply_directive(builder: ConfigBuilder, directive: Directive) -> None:
    kind = directive.kind
    if kind is DirectiveKind.DEBUG:
        builder.debug += 1
    elif kind is DirectiveKind.SKIP_ALL:
        builder.skip_all()
    elif kind is DirectiveKind.SKIP:
        for name in directive.args:
            builder.skip(name)
    elif kind is DirectiveKind.SKIP_ERROR:
        pattern = directive.args[0] if directive.args else ""
        if not pattern:
            logger.warning("第 %d 行: skip_error 缺少规则，已忽略", directive.line)
            return
        builder.skip_errors.append(pattern)
    elif kind is DirectiveKind.MODULES:
        builder.modules.extend(directive.args)
    elif kind is DirectiveKind.INCLUDES:
        builder.include_paths.extend(directive.args)


def apply_directives(builder: ConfigBuilder, directives: Iterable[Directive]) -> ConfigBuilder:
    for directive in directives:
        apply_directive(builder, directive)
    return builder


__all__ = [
    "Directive",
    "DirectiveKind",
    "apply_directive",
    "apply_directives",
    "parse_directive",
    "scan_directives",
    "split_directive",
]
