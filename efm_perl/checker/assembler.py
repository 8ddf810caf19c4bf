"""根据配置与探测结果组装 `perl -c` 命令。"""

from __future__ import annotations

import logging
from typing import List

from ..config import (
    LINT_MODULE,
    LINT_TEST,
    STRICT_OO_CHECK,
    STRICT_OO_MODULE,
    CheckConfig,
    ConfigBuilder,
)
from .prober import CapabilityProber


logger = logging.getLogger(__name__)

CHECK_FLAG = "-c"


def module_name(activation: str) -> str:
    """从 `-M` 参数中取出裸模块名。

    例如 `-indirect=fatal` -> `indirect`，`Foo::Bar()` -> `Foo::Bar`。
    """

    name = activation
    if name.startswith("-"):
        name = name[1:]
    name = name.split("=", 1)[0]
    if name.endswith("()"):
        name = name[:-2]
    return name


def lint_activation(config: CheckConfig) -> str:
    enabled = config.enabled_lint_checks()
    return "O=Lint," + ",".join(enabled or ["none"])


def _probe(prober: CapabilityProber, identifier: str, debug: int) -> bool:
    available = prober.exists(identifier)
    if debug >= 2:
        logger.debug("探测 %s: %s", identifier, "可用" if available else "不可用")
    return available


def _resolve_lint(builder: ConfigBuilder, prober: CapabilityProber) -> None:
    if LINT_TEST not in builder.syntax_tests:
        return

    if not _probe(prober, LINT_MODULE, builder.debug):
        logger.debug("未安装 %s，跳过 lint", LINT_MODULE)
        del builder.syntax_tests[LINT_TEST]
        return

    if builder.lint_checks.get(STRICT_OO_CHECK) and _probe(prober, STRICT_OO_MODULE, builder.debug):
        builder.modules.append(STRICT_OO_MODULE)
    else:
        builder.lint_checks[STRICT_OO_CHECK] = False

    builder.syntax_tests[LINT_TEST] = lint_activation(builder.build())


def resolve_config(config: CheckConfig, prober: CapabilityProber) -> CheckConfig:
    """剔除环境中不可用的语法测试，并生成 lint 的组合参数。

    `modules` 指令添加的额外模块不做探测。
    """

    builder = config.to_builder()
    _resolve_lint(builder, prober)

    for test, activation in list(builder.syntax_tests.items()):
        if test == LINT_TEST:
            continue
        name = module_name(activation)
        if not _probe(prober, name, builder.debug):
            logger.debug("未安装 %s，跳过测试 %s", name, test)
            del builder.syntax_tests[test]

    return builder.build()


def build_command(config: CheckConfig, source: str, perl: str = "perl") -> List[str]:
    command: List[str] = [perl]
    command.extend(f"-I{path}" for path in config.include_paths)
    command.extend(f"-M{activation}" for activation in config.syntax_tests.values())
    command.extend(f"-M{module}" for module in config.modules)
    command.append(CHECK_FLAG)
    command.append(source)
    return command


__all__ = [
    "CHECK_FLAG",
    "build_command",
    "lint_activation",
    "module_name",
    "resolve_config",
]
