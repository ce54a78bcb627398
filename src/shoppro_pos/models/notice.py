"""Operator notices"""

from enum import Enum

from pydantic import BaseModel


class NoticeKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    LOW_STOCK = "low-stock"


class Notice(BaseModel):
    """Transient message shown to the operator after an action"""

    kind: NoticeKind
    message: str

    model_config = {"frozen": True}
