"""提供设置文件读写所需的 I/O 工具，包括目录创建、原子写入、文件锁与受控访问。"""  # 模块说明。
# 导入 json 以支持 JSONL 追加写入。
import json
# 导入 os 模块以执行文件系统操作与原子替换。
import os
# 导入 stat 用于设置锁文件权限。
import stat
# 导入 time 以在等待文件锁时休眠与处理超时逻辑。
import time
# 导入 contextlib.contextmanager 以实现 with 语句上下文管理器。
from contextlib import contextmanager
# 导入 pathlib.Path 统一处理路径对象。
from pathlib import Path
# 导入 typing 以进行类型注释。
from typing import Iterator

# 导入错误翻译函数，将 OSError 转换为设置系统的错误类型。
from bundlecfg.utils.errors import translate_os_error

# 尝试导入 fcntl 以在 POSIX 系统上实现文件锁。
try:
    import fcntl  # type: ignore
except ImportError:
    fcntl = None  # Windows 上不存在 fcntl，后续退化到基于文件创建的锁。


# 定义安全创建目录的函数，确保重复调用也不会抛异常。
def safe_mkdirs(path: str | os.PathLike[str]) -> None:
    """创建目标目录及其父级目录，目录已存在时静默跳过。"""  # 函数说明。
    Path(path).mkdir(parents=True, exist_ok=True)


# 定义受控的文件系统访问上下文，所有设置文件读写都经过这里。
@contextmanager
def filesystem_access(path: str | os.PathLike[str] | None, action: str = "write") -> Iterator[Path | None]:
    """在上下文中产出 Path 对象，并把其中抛出的 OSError 翻译为 FileSystemAccessError。"""  # 函数说明。
    # 路径缺失时仍然进入上下文，由调用方决定如何处理 None。
    target = Path(path) if path is not None else None
    try:
        yield target
    except OSError as exc:
        # 翻译后的异常保留原始异常链，不做任何吞并。
        raise translate_os_error(exc, os.fspath(path) if path is not None else None, action) from exc


# 定义以原子方式写入文本的函数。
def atomic_write_text(path: str | os.PathLike[str], text: str) -> None:
    """通过临时文件写入文本内容，并以原子方式替换目标文件。"""  # 函数说明。
    target_path = Path(path)
    # 确保父目录存在。
    safe_mkdirs(target_path.parent)
    # 构造临时文件路径，追加 .tmp 后缀以便后续清理。
    tmp_path = target_path.with_name(f"{target_path.name}.tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as handle:
            handle.write(text)
        # os.replace 在同一文件系统上是原子操作，可覆盖旧文件。
        os.replace(tmp_path, target_path)
    finally:
        # 如果临时文件仍然存在（替换失败），进行清理。
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


# 定义跨平台文件锁的上下文管理器，供日志追加使用。
@contextmanager
def with_file_lock(lock_path: str | os.PathLike[str], timeout_sec: float) -> Iterator[None]:
    """尝试在指定路径创建独占文件锁，超时则抛出 TimeoutError。"""  # 函数说明。
    path = Path(lock_path)
    safe_mkdirs(path.parent)
    # 记录开始时间以便计算剩余时间。
    start = time.monotonic()
    interval = 0.05  # 轮询间隔。
    fd: int | None = None
    while True:
        try:
            if fcntl is not None:
                # 以读写模式打开锁文件，若不存在则创建。
                fd = os.open(path, os.O_RDWR | os.O_CREAT, mode=stat.S_IRUSR | stat.S_IWUSR)
                try:
                    # 申请非阻塞的独占锁。
                    fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except BlockingIOError:
                    os.close(fd)
                    fd = None
            else:
                # 无系统级锁支持时，使用 O_EXCL 创建文件实现自旋锁。
                fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_RDWR)
                break
        except FileExistsError:
            fd = None
        # 检查是否已经超过超时时间。
        if time.monotonic() - start >= timeout_sec:
            raise TimeoutError(f"Timed out acquiring lock: {path}")
        time.sleep(interval)
    try:
        yield
    finally:
        try:
            if fd is not None:
                if fcntl is not None:
                    fcntl.flock(fd, fcntl.LOCK_UN)
                os.close(fd)
        finally:
            path.unlink(missing_ok=True)


# 定义追加 JSON 行到 JSONL 文件的函数。
def jsonl_append(path: str | os.PathLike[str], record: dict) -> None:
    """在文件锁保护下向 JSONL 文件追加一行记录。"""  # 函数说明。
    target = Path(path)
    safe_mkdirs(target.parent)
    # 为 JSONL 文件单独创建锁文件避免并发写入。
    lock_path = target.with_suffix(target.suffix + ".lock")
    with with_file_lock(lock_path, timeout_sec=30):
        with target.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")
