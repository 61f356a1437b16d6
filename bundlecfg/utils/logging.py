"""提供结构化日志工具，支持 human 与 jsonl 两种输出格式。"""  # 模块文档说明，描述本文件的作用。
from __future__ import annotations  # 启用延迟求值的注解语义以支持联合类型语法。

import json  # 导入 json 以在 JSONL 格式下序列化日志记录。
import sys  # 导入 sys 以访问标准输出流对象。
import traceback  # 导入 traceback 以在 exception 日志中附带堆栈。
from datetime import datetime, timezone  # 导入 datetime 以生成 UTC 时间戳。
from pathlib import Path  # 导入 Path 便于处理日志文件路径。
from typing import Any, Dict, Optional, TextIO  # 导入类型注释以提升可读性。

from bundlecfg.utils.io import jsonl_append, safe_mkdirs, with_file_lock  # 导入 I/O 工具用于安全追加。

_LEVELS = {  # 定义日志等级到数值的映射，兼容 logging 模块的约定。
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


def _normalize_level(level: str) -> str:
    """将外部传入的日志等级规范化为大写并验证合法性。"""  # 函数说明。
    upper = level.upper()  # 转换为大写方便匹配字典键。
    if upper not in _LEVELS:  # 检查是否为已知等级。
        raise ValueError(f"Unsupported log level: {level}")  # 不支持的等级直接抛出异常。
    return upper


def _append_text_locked(path: Path, text: str) -> None:
    """以锁保护的方式向纯文本日志追加一行，避免并发写入冲突。"""  # 函数说明。
    safe_mkdirs(path.parent)  # 确保日志目录存在。
    lock_path = path.with_suffix(path.suffix + ".lock")  # 为该文件生成锁文件路径。
    with with_file_lock(lock_path, timeout_sec=30):  # 使用文件锁保护写入区域。
        with path.open("a", encoding="utf-8") as handle:
            handle.write(text)
            handle.write("\n")


class _LoggerCore:
    """封装日志格式化与写入细节的内部核心类。"""  # 类说明。

    def __init__(
        self,
        log_format: str,
        level: str,
        log_file: str | None,
        quiet: bool,
        stream: TextIO | None = None,
    ) -> None:
        """初始化日志核心，保存格式、等级与输出目标。"""  # 方法说明。
        normalized = log_format.lower()  # 统一格式字符串大小写。
        if normalized not in {"human", "jsonl"}:  # 校验格式是否受支持。
            raise ValueError(f"Unsupported log format: {log_format}")
        self.format = normalized
        self.level = _LEVELS[_normalize_level(level)]  # 将等级转换为数值阈值。
        self.log_file = Path(log_file) if log_file else None
        self.quiet = quiet  # 静默模式下不写控制台，仅写文件。
        self._stream = stream  # 为 None 时在写入时刻解析 sys.stderr，便于 capsys 捕获。
        if self.log_file is not None:
            safe_mkdirs(self.log_file.parent)

    @property
    def _console(self) -> TextIO:
        """返回控制台输出流，默认使用标准错误以免污染命令输出。"""  # 方法说明。
        return self._stream if self._stream is not None else sys.stderr

    def _timestamp(self) -> str:
        """返回带毫秒精度的 UTC ISO8601 时间戳。"""  # 方法说明。
        now = datetime.now(timezone.utc)
        return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def _render_human(self, record: Dict[str, Any]) -> str:
        """将日志记录渲染为人类易读的字符串。"""  # 方法说明。
        parts = [f"[{record['level']}]", record["ts"]]  # 等级标签与时间戳。
        component = record.get("component")  # 读取组件上下文字段。
        if component:
            parts.append(f"component={component}")
        parts.append(record["msg"])  # 追加原始消息文本。
        for key, value in record.items():  # 其余字段以 key=value 形式追加。
            if key in {"ts", "level", "msg", "component", "trace"}:
                continue
            parts.append(f"{key}={value}")
        base = " ".join(parts)
        trace_text = record.get("trace")
        if isinstance(trace_text, str) and trace_text.strip():
            # 堆栈信息缩进四格追加在基础行之后。
            extra_lines = ["    " + line for line in trace_text.rstrip().splitlines()]
            return "\n".join([base, *extra_lines])
        return base

    def emit(self, level: str, message: str, fields: Dict[str, Any]) -> None:
        """根据配置输出一条日志记录。"""  # 方法说明。
        normalized = _normalize_level(level)
        if _LEVELS[normalized] < self.level:  # 低于阈值的日志直接丢弃。
            return
        record: Dict[str, Any] = {
            "ts": self._timestamp(),
            "level": normalized,
            "msg": message,
        }
        record.update(fields)  # 合并调用方提供的扩展字段。
        if self.format == "human":
            rendered = self._render_human(record)
            if not self.quiet:
                self._console.write(rendered + "\n")
                self._console.flush()
            if self.log_file is not None:
                _append_text_locked(self.log_file, rendered)
        else:
            if not self.quiet:
                self._console.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
                self._console.flush()
            if self.log_file is not None:
                # default=str 无法透传给 jsonl_append，先转一遍保证可序列化。
                jsonl_append(str(self.log_file), json.loads(json.dumps(record, default=str)))


class StructuredLogger:
    """对外暴露的结构化日志器，支持上下文绑定与多格式输出。"""  # 类说明。

    def __init__(self, core: _LoggerCore, context: Optional[Dict[str, Any]] = None, parent: "StructuredLogger" | None = None) -> None:
        """创建日志器实例，可选地继承父级上下文。"""  # 方法说明。
        self._core = core
        self._context = context or {}
        self._parent = parent

    def _collect_context(self) -> Dict[str, Any]:
        """递归合并父级上下文并返回总上下文字典。"""  # 方法说明。
        aggregated: Dict[str, Any] = {}
        if self._parent is not None:
            aggregated.update(self._parent._collect_context())
        aggregated.update(self._context)
        return aggregated

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """基于当前实例追加上下文字段并返回新的子日志器。"""  # 方法说明。
        return StructuredLogger(self._core, context=kwargs, parent=self)

    def log(self, level: str, message: str, **fields: Any) -> None:
        """记录一条带指定等级的日志，可附带额外字段。"""  # 方法说明。
        payload = self._collect_context()
        payload.update(fields)
        self._core.emit(level, message, payload)

    def debug(self, message: str, **fields: Any) -> None:
        """输出 DEBUG 级日志。"""
        self.log("DEBUG", message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        """输出 INFO 级日志。"""
        self.log("INFO", message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        """输出 WARNING 级日志。"""
        self.log("WARNING", message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        """输出 ERROR 级日志。"""
        self.log("ERROR", message, **fields)

    def exception(self, message: str, exc: BaseException | None = None, **fields: Any) -> None:
        """输出包含异常堆栈的 ERROR 级日志。"""  # 方法说明。
        exception_obj = exc
        if exception_obj is None:
            _, exception_obj, _ = sys.exc_info()
        if exception_obj is not None:
            fields.setdefault("error", str(exception_obj))
            fields.setdefault("error_type", exception_obj.__class__.__name__)
            fields.setdefault(
                "trace",
                "".join(traceback.format_exception(exception_obj.__class__, exception_obj, exception_obj.__traceback__)),
            )
        self.log("ERROR", message, **fields)


def get_logger(
    format: str = "human",
    level: str = "INFO",
    log_file: str | None = None,
    quiet: bool = False,
    *,
    stream: TextIO | None = None,
) -> StructuredLogger:
    """创建并返回结构化日志器，支持 human/jsonl 两种模式。"""  # 函数说明。
    core = _LoggerCore(format, level, log_file, quiet, stream=stream)  # 初始化核心组件。
    return StructuredLogger(core)


def default_logger() -> StructuredLogger:
    """返回库内部默认使用的日志器：仅输出 WARNING 及以上级别。"""  # 函数说明。
    return get_logger(level="WARNING").bind(component="settings")
