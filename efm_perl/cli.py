"""命令行接口。

对单个 Perl 源文件执行 `perl -c` 语法检查，叠加环境中可用的静态检查模块，
并按忽略规则过滤后以 `文件:行` 风格原样输出诊断信息，供编辑器的 errorformat 使用。
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

from .checker.prober import CheckerNotFoundError
from .checker.runner import CheckRunner


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="efm-perl",
        description="对 Perl 源码执行语法检查并过滤诊断输出",
    )
    parser.add_argument("source", help="待检查的 Perl 源码文件")
    return parser


def _validate_source(parser: argparse.ArgumentParser, source: str) -> None:
    path = Path(source)
    if not path.exists():
        parser.error(f"未找到源码文件: {source}")
    if not path.is_file():
        parser.error(f"不是普通文件: {source}")
    if not os.access(path, os.R_OK):
        parser.error(f"源码文件不可读: {source}")


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _validate_source(parser, args.source)

    logging.basicConfig(
        level=logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        runner = CheckRunner()
        report = runner.check(args.source)
    except CheckerNotFoundError as exc:
        print(f"efm-perl: {exc}", file=sys.stderr)
        return 1

    if report.reported:
        print(report.format_text())

    return 0


if __name__ == "__main__":  # pragma: no cover - CLI 入口
    raise SystemExit(main())
