"""检查运行入口。"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Tuple

from ..config import CheckConfig, DEFAULT_CONFIG, ToolPaths
from .assembler import build_command, resolve_config
from .directives import apply_directives, scan_directives
from .prober import CapabilityProber, CheckerNotFoundError, PerldocProber, locate_perldoc
from .report import Report, Verdict, filter_diagnostics


logger = logging.getLogger(__name__)


def load_config(text: str, base: CheckConfig | None = None) -> CheckConfig:
    """在默认配置上应用源码中的全部指令。"""

    builder = (base or DEFAULT_CONFIG).to_builder()
    apply_directives(builder, scan_directives(text))
    return builder.build()


def _set_debug_level(debug: int) -> None:
    if debug > 0:
        logging.getLogger("efm_perl").setLevel(logging.DEBUG)


class CheckRunner:
    def __init__(self, prober: CapabilityProber | None = None, paths: ToolPaths | None = None):
        self.paths = paths or ToolPaths.from_env()
        if prober is None:
            prober = PerldocProber(locate_perldoc(self.paths))
        self.prober = prober

    def prepare(self, source: str, text: str) -> Tuple[CheckConfig, List[str]]:
        config = load_config(text)
        _set_debug_level(config.debug)
        logger.debug("指令解析后的配置: %s", config)

        config = resolve_config(config, self.prober)
        command = build_command(config, source, self.paths.perl)
        logger.debug("执行命令: %s", " ".join(command))
        return config, command

    def check(self, source: str) -> Report:
        text = Path(source).read_text(encoding="utf-8", errors="replace")
        config, command = self.prepare(source, text)

        try:
            result = subprocess.run(command, capture_output=True, text=True, errors="replace")
        except OSError as exc:
            raise CheckerNotFoundError(f"无法运行 `{self.paths.perl}`: {exc}") from exc

        diagnostics = filter_diagnostics(result.stderr, source, config.skip_errors)
        if config.debug >= 2:
            for diagnostic in diagnostics:
                if diagnostic.verdict is Verdict.SUPPRESSED:
                    logger.debug("已忽略 (%s): %s", diagnostic.pattern, diagnostic.text)

        report = Report(source, command, diagnostics)
        logger.debug("%s 诊断统计: %s", " ".join(report.command), report.verdict_summary())
        return report


__all__ = ["CheckRunner", "load_config"]
