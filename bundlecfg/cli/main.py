"""命令行入口，负责解析参数并调用设置门面完成查询与写入。"""  # 模块说明。
import argparse  # 导入 argparse 以解析命令行参数。
import sys  # 导入 sys 以支持通过 python -m 调用。
from pathlib import Path  # 导入 Path 以处理项目根目录参数。

from bundlecfg.settings.core import Settings  # 导入设置门面。
from bundlecfg.settings.report import render_effective_settings, save_effective_settings  # 导入快照工具。
from bundlecfg.utils.errors import BundleConfigError  # 导入错误基类以统一转换退出码。
from bundlecfg.utils.logging import StructuredLogger, get_logger  # 导入日志工具创建结构化日志器。


def parse_bool(value: str) -> bool:
    """将传入值解析为布尔类型，仅接受 true/false。"""  # 函数说明。

    if isinstance(value, bool):  # 若已是布尔值直接返回。
        return value
    normalized = value.lower()  # 统一转换为小写。
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise argparse.ArgumentTypeError("Expected 'true' or 'false'")  # 其他值抛出错误。


def _format_value(value: object) -> str:
    """把转换后的值格式化为命令行输出文本。"""  # 函数说明。

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_parser() -> argparse.ArgumentParser:
    """创建参数解析器并声明所有可用选项与子命令。"""  # 函数说明。

    parser = argparse.ArgumentParser(
        prog="bundlecfg",
        description="Read and write layered package-manager settings",
    )
    parser.add_argument("--root", default=None, help="项目根目录，本地配置写入 <root>/config")
    parser.add_argument(
        "--log-format",
        choices=["human", "jsonl"],
        default="human",
        help="日志格式，human 适合调试，jsonl 适合机器消费",
    )
    parser.add_argument("--log-level", default="WARNING", help="日志等级（DEBUG/INFO/WARNING/ERROR）")
    parser.add_argument("--log-file", default=None, help="可选日志文件路径，追加写入")
    parser.add_argument(
        "--quiet",
        type=parse_bool,
        default=False,
        help="静默模式，控制台不输出日志 (true/false)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    get_cmd = commands.add_parser("get", help="打印某个键的最终取值")
    get_cmd.add_argument("key")

    set_cmd = commands.add_parser("set", help="写入某个键，默认写入本地配置")
    set_cmd.add_argument("key")
    set_cmd.add_argument("value")
    set_cmd.add_argument("--global", dest="use_global", action="store_true", help="写入用户全局配置")

    unset_cmd = commands.add_parser("unset", help="删除某个键，默认从本地配置删除")
    unset_cmd.add_argument("key")
    unset_cmd.add_argument("--global", dest="use_global", action="store_true", help="从用户全局配置删除")

    commands.add_parser("list", help="列出所有已配置的键与取值")

    locations_cmd = commands.add_parser("locations", help="显示某个键在各层中的取值")
    locations_cmd.add_argument("key")

    print_cmd = commands.add_parser("print-config", help="打印生效设置快照")
    print_cmd.add_argument("--save", default=None, help="同时保存快照到指定路径")
    print_cmd.add_argument(
        "--sources",
        type=parse_bool,
        default=True,
        help="是否在每行末尾附加来源注释 (true/false)",
    )

    mirror_cmd = commands.add_parser("mirror", help="显示某个源地址对应的镜像")
    mirror_cmd.add_argument("uri")
    return parser


def _run_command(args: argparse.Namespace, settings: Settings, logger: StructuredLogger) -> int:
    """执行解析出的子命令，返回退出码。"""  # 函数说明。

    if args.command == "get":
        value = settings.get(args.key)
        print(_format_value(value))
        return 0 if value is not None else 1  # 未配置的键以非零退出，便于脚本判断。
    if args.command == "set":
        if args.use_global:
            settings.set_global(args.key, args.value)
        else:
            settings.set_local(args.key, args.value)
        logger.info("setting stored", key=args.key, scope="global" if args.use_global else "local")
        return 0
    if args.command == "unset":
        if args.use_global:
            settings.set_global(args.key, None)
        else:
            settings.delete(args.key)
        return 0
    if args.command == "list":
        for name in sorted(settings.all_keys()):
            print(f"{name}")
            for line in settings.pretty_values(name):
                print(f"  {line}")
        return 0
    if args.command == "locations":
        for line in settings.pretty_values(args.key):
            print(line)
        return 0
    if args.command == "print-config":
        print(render_effective_settings(settings, include_sources=args.sources), end="")
        if args.save:
            save_effective_settings(settings, args.save, include_sources=args.sources)
            logger.info("settings snapshot saved", path=args.save)
        return 0
    if args.command == "mirror":
        print(settings.mirror_for(args.uri))
        return 0
    raise AssertionError(f"unhandled command {args.command}")  # argparse 已限制可选命令。


def main(argv: list[str] | None = None) -> int:
    """解析参数并执行子命令，返回退出状态码。"""  # 函数说明。

    parser = build_parser()  # 构建解析器。
    args = parser.parse_args(argv)  # 解析命令行参数。
    logger = get_logger(
        format=args.log_format,
        level=args.log_level,
        log_file=args.log_file,
        quiet=args.quiet,
    ).bind(component="cli")  # 根据参数创建结构化日志器。
    try:
        settings = Settings(root=Path(args.root) if args.root else None, logger=logger)
        return _run_command(args, settings, logger)
    except BundleConfigError as exc:
        logger.error("settings command failed", command=args.command, error=str(exc), error_type=exc.__class__.__name__)
        return 1  # 非零退出表示失败。


if __name__ == "__main__":  # 允许脚本直接运行。
    sys.exit(main())  # 将返回值作为进程退出码。
