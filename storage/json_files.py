from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


class JsonFileStore(Generic[T]):
    """
    Whole-file JSON persistence: every load reads the file, every save rewrites it.

    A missing or unreadable file loads as default_factory(). There is no
    locking; two interleaved writers lose one update (last write wins).
    """

    def __init__(self, path: str | Path, default_factory: Callable[[], T], *, label: str = "Store") -> None:
        self.path = Path(path)
        self.default_factory = default_factory
        self.label = label

    def load_raw(self) -> Any:
        if not self.path.exists():
            return None
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except Exception as e:
            print(f"[{self.label}] error loading {self.path}: {e}")
            return None

    def load(self) -> T:
        raw = self.load_raw()
        if raw is None:
            return self.default_factory()
        return raw

    def save(self, value: T) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(value, indent=2, ensure_ascii=False), encoding="utf-8")
            return True
        except Exception as e:
            print(f"[{self.label}] error saving {self.path}: {e}")
            return False
