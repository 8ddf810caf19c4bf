"""可选模块探测。"""

from __future__ import annotations

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod

from ..config import ToolPaths


logger = logging.getLogger(__name__)


class CheckerNotFoundError(RuntimeError):
    """找不到必需的外部工具 (perldoc / perl)。"""


class CapabilityProber(ABC):
    @abstractmethod
    def exists(self, identifier: str) -> bool:
        """判断模块在当前环境中是否可用。"""


class PerldocProber(CapabilityProber):
    """通过 `perldoc -l` 查询模块是否已安装。"""

    def __init__(self, perldoc: str):
        self.perldoc = perldoc

    def exists(self, identifier: str) -> bool:
        try:
            result = subprocess.run(
                [self.perldoc, "-l", identifier],
                capture_output=True,
                text=True,
                errors="replace",
            )
        except OSError as exc:
            logger.debug("探测 `%s` 失败: %s", identifier, exc)
            return False
        return result.returncode == 0


def locate_perldoc(paths: ToolPaths | None = None) -> str:
    """返回 perldoc 的完整路径，找不到时抛出 `CheckerNotFoundError`。"""

    paths = paths or ToolPaths.from_env()
    location = shutil.which(paths.perldoc)
    if location is None:
        raise CheckerNotFoundError(
            f"未找到 `{paths.perldoc}`。请安装 perl 文档工具或设置环境变量 EFM_PERL_PERLDOC。"
        )
    return location


__all__ = [
    "CapabilityProber",
    "CheckerNotFoundError",
    "PerldocProber",
    "locate_perldoc",
]
