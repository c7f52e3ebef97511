"""
Elm Forest 命令行接口模块。
"""

import argparse
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from elmforest import __version__
from elmforest.core.config_manager import ConfigManager
from elmforest.core.version_manager import VersionManager

HELP_TEXT = """forest : Elm 版本管理器与代理

子命令:
  init [version]      使用指定版本初始化新的 Elm 项目（默认 latest）
  get [version]       预先安装指定版本（默认 latest）
  list                列出可用的 Elm 版本
  current             显示当前目录将使用的 Elm 版本
  remove <version>    卸载指定版本
  elm [arg ...]       将参数传给当前项目对应版本的 elm
  npm [arg ...]       将参数传给安装当前 elm 所用的 npm
  -- [arg ...]        子命令 elm 的别名

选项:
  -v, --verbose       启用详细输出
  --version           显示 forest 版本
  -h, --help          显示此帮助信息

其余参数会原样传给当前项目对应版本的 elm（等同于子命令 elm）。
"""

SUBCOMMANDS = ("init", "get", "list", "current", "remove")
VERBOSE_FLAGS = ("-v", "--verbose")
HELP_FLAGS = ("-h", "--help")

ManagerFactory = Callable[[], VersionManager]


def create_parser() -> argparse.ArgumentParser:
    """
    创建并配置内置子命令的参数解析器。

    elm、npm 和 -- 的参数原样透传，不经过此解析器。

    返回:
        配置好的 ArgumentParser 实例
    """
    parser = argparse.ArgumentParser(
        prog="forest",
        description="Elm Forest - Elm 版本管理器与代理",
        add_help=False,
    )

    subparsers = parser.add_subparsers(dest="command")

    init_parser = subparsers.add_parser("init", help="初始化新的 Elm 项目")
    init_parser.add_argument("version", nargs="?", default="latest", help="要使用的版本")

    get_parser = subparsers.add_parser("get", help="预先安装指定版本")
    get_parser.add_argument("version", nargs="?", default="latest", help="要安装的版本")

    subparsers.add_parser("list", help="列出可用的 Elm 版本")
    subparsers.add_parser("current", help="显示当前目录将使用的 Elm 版本")

    remove_parser = subparsers.add_parser("remove", help="卸载指定版本")
    remove_parser.add_argument("version", help="要卸载的版本")

    return parser


def default_manager() -> VersionManager:
    """
    获取使用默认配置的版本管理器。

    返回:
        VersionManager 实例
    """
    config = ConfigManager().config
    return VersionManager(config)


def handle_init(args: argparse.Namespace, manager: VersionManager) -> int:
    """
    处理 init 命令：使用指定版本初始化项目。

    参数:
        args: 解析后的命令行参数
        manager: 版本管理器

    返回:
        退出码
    """
    return manager.init(args.version)


def handle_get(args: argparse.Namespace, manager: VersionManager) -> int:
    """
    处理 get 命令：安装指定版本。

    参数:
        args: 解析后的命令行参数
        manager: 版本管理器

    返回:
        退出码
    """
    version, installed = manager.install(args.version)
    if installed:
        print(f"已安装 Elm {version.expanded}")
    else:
        print(f"Elm {version.expanded} 已经安装")
    return 0


def handle_list(args: argparse.Namespace, manager: VersionManager) -> int:
    """
    处理 list 命令：列出可用版本，已安装的版本以 * 标记。

    参数:
        args: 解析后的命令行参数
        manager: 版本管理器

    返回:
        退出码
    """
    versions = manager.list_versions()
    print("可用的 Elm 版本（* = 已安装）")
    for version, installed in versions:
        marker = "*" if installed else " "
        print(f"  {marker} {version.expanded}")
    return 0


def handle_current(args: argparse.Namespace, manager: VersionManager) -> int:
    """
    处理 current 命令：显示当前项目使用的版本。

    参数:
        args: 解析后的命令行参数
        manager: 版本管理器

    返回:
        退出码
    """
    project = manager.current()
    print(f"位于 `{project.project.directory}` 的 Elm 项目使用 {project.version.expanded}")
    return 0


def handle_remove(args: argparse.Namespace, manager: VersionManager) -> int:
    """
    处理 remove 命令：卸载指定版本。

    参数:
        args: 解析后的命令行参数
        manager: 版本管理器

    返回:
        退出码
    """
    if manager.remove(args.version):
        print(f"已卸载 Elm {args.version}")
    else:
        print(f"Elm {args.version} 未安装")
    return 0


def handle_version() -> int:
    print(__version__)
    print("查看 elm 版本请运行 `forest current`，或 `forest elm --version`")
    return 0


COMMAND_HANDLERS: Dict[str, Callable[[argparse.Namespace, VersionManager], int]] = {
    "init": handle_init,
    "get": handle_get,
    "list": handle_list,
    "current": handle_current,
    "remove": handle_remove,
}


def split_global_flags(argv: Sequence[str]) -> Tuple[bool, List[str]]:
    """
    拆出位于最前面的全局选项。

    参数:
        argv: 命令行参数（不含程序名）

    返回:
        (是否启用详细输出, 剩余参数) 元组
    """
    args = list(argv)
    verbose = False
    while args and args[0] in VERBOSE_FLAGS:
        verbose = True
        args.pop(0)
    return verbose, args


def run_cli(args: Sequence[str], manager_factory: Optional[ManagerFactory] = None) -> int:
    """
    运行命令行接口。

    参数:
        args: 去掉全局选项后的命令行参数
        manager_factory: 创建 VersionManager 的工厂，默认为 default_manager

    返回:
        退出码（0 表示成功）
    """
    factory = manager_factory or default_manager

    if not args or args[0] in HELP_FLAGS:
        print(HELP_TEXT)
        return 0

    command = args[0]
    if command == "--version":
        return handle_version()
    if command in ("elm", "--"):
        return factory().run_elm_here(args[1:])
    if command == "npm":
        return factory().run_npm_here(args[1:])
    if command not in SUBCOMMANDS:
        return factory().run_elm_here(args)

    parsed = create_parser().parse_args(args)
    return COMMAND_HANDLERS[parsed.command](parsed, factory())
