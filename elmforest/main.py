"""
Elm Forest 应用程序主入口点。
"""

import logging
import sys
from typing import List, Optional

from elmforest.cli import run_cli, split_global_flags
from elmforest.core.config_manager import LOG_DIR_NAME, ConfigManager
from elmforest.core.errors import GENERIC_EXIT_CODE, ForestError
from elmforest.core.version_manager import VersionManager
from elmforest.utils.logger import get_logger, setup_logger


def main(args: Optional[List[str]] = None) -> int:
    """
    应用程序主入口点。

    参数:
        args: 命令行参数。如果为 None，将使用 sys.argv[1:]。

    返回:
        退出码（0 表示成功，非零表示错误）。
    """
    argv = sys.argv[1:] if args is None else list(args)
    verbose, argv = split_global_flags(argv)

    config_manager = ConfigManager()
    setup_logger(
        level=logging.DEBUG if verbose else logging.INFO,
        log_dir=config_manager.root / LOG_DIR_NAME,
    )
    logger = get_logger()

    try:
        config = config_manager.config
        return run_cli(argv, lambda: VersionManager(config))
    except ForestError as e:
        logger.debug(f"{e!r}")
        print(f"FOREST ERROR: {e.message}", file=sys.stderr)
        return e.exit_code
    except KeyboardInterrupt:
        return GENERIC_EXIT_CODE
    except Exception as e:
        logger.debug("未预料的错误", exc_info=True)
        print(f"FOREST ERROR: 未知错误: {e}", file=sys.stderr)
        return GENERIC_EXIT_CODE


if __name__ == "__main__":
    sys.exit(main())
