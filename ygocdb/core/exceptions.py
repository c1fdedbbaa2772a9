from typing import Optional


class YGOCDBError(Exception):
    """Base exception for card search operations."""

    kind = "错误"

    def __init__(self, message: str = "", *, subject: Optional[str] = None):
        super().__init__(message or self.kind)
        self.subject = subject

    def user_message(self) -> str:
        """Single line shown to the user: failure kind plus offending input."""
        if self.subject:
            return f"{self.kind}：{self.subject}"
        return self.kind


class ConfigError(YGOCDBError):
    """Raised when a disabled feature is invoked."""

    kind = "别名功能未启用"


class AliasFileError(YGOCDBError):
    """Raised when the alias document cannot be parsed."""

    kind = "别名文件格式错误"


class ArgumentError(YGOCDBError):
    """Raised when alias command arguments are malformed."""

    kind = "参数格式错误"


class StorageError(YGOCDBError):
    """Raised when the alias document cannot be read or written."""

    kind = "别名文件读写失败"


class AliasConflict(YGOCDBError):
    """Raised when an alias already belongs to another canonical name."""

    kind = "别名已被其他卡名占用"


class AliasExists(YGOCDBError):
    """Raised when an alias already belongs to the same canonical name."""

    kind = "别名已存在"


class AliasNotFound(YGOCDBError):
    """Raised when the canonical/alias pair does not exist."""

    kind = "别名不存在"


class LookupFailure(YGOCDBError):
    """Raised when the card database request fails."""

    kind = "查询卡片信息时发生错误"


class CardParseError(LookupFailure):
    """Raised when a card record is missing required fields."""

    kind = "卡片数据格式错误"
