from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import Post


class Source(ABC):
    name: str

    @abstractmethod
    def fetch(self) -> list[Post]:
        raise NotImplementedError


def source_names() -> list[str]:
    return ["search", "timeline", "csv"]
