from typing import Optional


class ArchiverError(Exception):
    """归档过程中所有错误的基类"""
    pass


class TransportError(ArchiverError):
    """网络错误或 HTTP 状态码 >= 400"""

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class NoChaptersFoundError(ArchiverError):
    """三种目录策略均未找到章节"""

    def __init__(self, url: str):
        super().__init__(f"No chapters found: {url}")
        self.url = url


class InvalidGroupSizeError(ArchiverError, ValueError):
    pass


class InvalidRangeError(ArchiverError, ValueError):
    pass


class UnsupportedHostError(ArchiverError):
    pass
