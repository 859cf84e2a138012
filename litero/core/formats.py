from enum import Enum
from typing import List


class StoryFormat(str, Enum):
    HTML = "html"
    TXT = "txt"
    MD = "md"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]

    @classmethod
    def is_valid(cls, value) -> bool:
        return str(getattr(value, "value", value) or "").lower() in cls.values()

    @classmethod
    def parse(cls, value) -> "StoryFormat":
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())
