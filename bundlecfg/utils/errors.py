"""定义设置系统使用的错误类型与 errno 分类辅助函数。"""  # 模块说明。
# 导入 errno 以识别常见的 I/O 错误码。
import errno


# 定义所有设置错误的公共基类，调用方可统一捕获。
class BundleConfigError(Exception):
    """设置读取与写入过程中所有错误的基类，不包含任何重试语义。"""  # 类说明。


# 定义缺少项目根目录时的错误。
class ConfigRootNotFound(BundleConfigError):
    """请求写入本地配置但无法推导项目根目录时抛出。"""  # 类说明。


# 定义非法参数错误，例如 URI 形式的键不是绝对地址。
class InvalidArgument(BundleConfigError, ValueError):
    """键或参数格式非法时抛出，同时兼容 ValueError 捕获。"""  # 类说明。


# 定义非法选项错误，例如缓存路径被配置为绝对路径。
class InvalidOption(BundleConfigError, ValueError):
    """配置值本身不被接受时抛出。"""  # 类说明。


# 定义文件系统访问失败的通用错误。
class FileSystemAccessError(BundleConfigError):
    """包装底层 OSError，记录路径、动作与 errno。"""  # 类说明。

    def __init__(self, message: str, path: str | None = None, action: str | None = None, code: int | None = None) -> None:
        """保存上下文字段以便日志与 CLI 输出。"""  # 方法说明。
        super().__init__(message)  # 交给基类保存消息文本。
        self.path = path  # 出错的文件路径。
        self.action = action  # 出错时执行的动作，例如 read/write。
        self.errno = code  # 原始 errno，未知时为 None。


# 权限不足通常需要用户手动干预。
class PermissionDenied(FileSystemAccessError):
    """文件或目录无读写权限。"""  # 类说明。


# 磁盘空间不足。
class NoSpaceOnDevice(FileSystemAccessError):
    """目标设备没有剩余空间。"""  # 类说明。


# 暂时性资源错误，仅作分类，设置系统本身从不重试。
class TemporaryResourceError(FileSystemAccessError):
    """资源暂时不可用，例如文件被占用或操作超时。"""  # 类说明。


_PERMISSION_ERRNOS = {errno.EACCES, errno.EPERM}  # 权限类 errno 集合。
_TEMPORARY_ERRNOS = {errno.EAGAIN, errno.EWOULDBLOCK, errno.EBUSY, errno.ETIMEDOUT}  # 暂时性 errno 集合。


# 定义 OSError 翻译函数，根据 errno 返回更具体的错误类型。
def translate_os_error(exc: OSError, path: str | None, action: str) -> FileSystemAccessError:
    """将 OSError 转换为设置系统的错误类型，调用方负责 raise ... from exc。"""  # 函数说明。
    # PermissionError 本身即代表权限问题，无论 errno 为何。
    if isinstance(exc, PermissionError) or exc.errno in _PERMISSION_ERRNOS:
        return PermissionDenied(
            f"There was an error while trying to {action} `{path}`. "
            "It is likely that you need to grant permissions for that path.",
            path=path,
            action=action,
            code=exc.errno,
        )
    # 磁盘写满时给出明确提示。
    if exc.errno == errno.ENOSPC:
        return NoSpaceOnDevice(
            f"There was an error while trying to {action} `{path}`. There was insufficient space remaining on the device.",
            path=path,
            action=action,
            code=exc.errno,
        )
    # 暂时性错误同样归类但不重试。
    if exc.errno in _TEMPORARY_ERRNOS:
        return TemporaryResourceError(
            f"There was an error while trying to {action} `{path}`. The resource is temporarily unavailable.",
            path=path,
            action=action,
            code=exc.errno,
        )
    # 无法识别的 errno 返回通用错误，保留原始描述。
    return FileSystemAccessError(
        f"There was an error accessing `{path}` ({action}): {exc.strerror or exc}",
        path=path,
        action=action,
        code=exc.errno,
    )
