import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional


class FixtureData:
    """Read-only access to tests/fixtures/test_data.json"""

    _data: Optional[Dict[str, Any]] = None

    @classmethod
    def load(cls) -> Dict[str, Any]:
        if cls._data is None:
            with open(Path(__file__).parent / "test_data.json", encoding="utf-8") as f:
                cls._data = json.load(f)
        return cls._data

    @classmethod
    def get(cls, key: str) -> Any:
        return copy.deepcopy(cls.load()[key])

    @classmethod
    def signup_payload(cls, key: str = "signup", **overrides) -> Dict[str, Any]:
        payload = cls.get(key)
        payload.update(overrides)
        return payload
