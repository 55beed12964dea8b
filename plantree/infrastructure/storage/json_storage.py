"""JSON file storage with Result-based error handling.

Reads and writes the two files plantree touches: the engine config and
seed plans. Plans are never written back; the engine keeps documents in
memory only.
"""

import json
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from plantree.domain.shared.result import Err, Ok, Result

M = TypeVar("M", bound=BaseModel)


class JsonStorage:
    """Low-level JSON file I/O returning Result values.

    Example:
        storage = JsonStorage()
        result = storage.load_model(Path("plan.json"), PlanDocument)
        if isinstance(result, Ok):
            document = result.value
    """

    def load_json(self, path: Path) -> Result[Any, str]:
        """Load JSON data from a file.

        Returns:
            Ok(data) if successful, Err(str) with error message if failed.
        """
        try:
            if not path.exists():
                return Err(f"File not found: {path}")
            return Ok(json.loads(path.read_text(encoding="utf-8")))
        except json.JSONDecodeError as e:
            return Err(f"Invalid JSON in {path}: {e}")
        except UnicodeDecodeError as e:
            return Err(f"Invalid encoding in {path}: {e}")
        except PermissionError:
            return Err(f"Permission denied reading {path}")
        except OSError as e:
            return Err(f"Error reading {path}: {e}")

    def load_model(self, path: Path, model: type[M]) -> Result[M, str]:
        """Load a file and validate it as a pydantic model."""
        loaded = self.load_json(path)
        if isinstance(loaded, Err):
            return loaded
        try:
            return Ok(model.model_validate(loaded.value))
        except ValidationError as e:
            return Err(f"Invalid {model.__name__} in {path}: {e.error_count()} error(s)")

    def save_model(self, path: Path, value: BaseModel, indent: int = 2) -> Result[None, str]:
        """Write a pydantic model as JSON, creating parent directories."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(value.model_dump_json(indent=indent), encoding="utf-8")
            return Ok(None)
        except PermissionError:
            return Err(f"Permission denied writing {path}")
        except OSError as e:
            return Err(f"Error writing {path}: {e}")
