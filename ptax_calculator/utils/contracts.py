import json
import logging
from pathlib import Path
from typing import Any, Dict
import jsonschema
from jsonschema.exceptions import ValidationError

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).parent.parent / "schemas"


class ContractError(Exception):
    """Raised when data violates a data contract."""

    pass


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a JSON schema from the package."""
    schema_path = SCHEMA_DIR / f"{schema_name}.json"
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    with open(schema_path, "r", encoding="utf-8") as f:
        return dict(json.load(f))


def validate_output(data: Any, schema_name: str, mode: str = "STRICT") -> None:
    """
    Validate data against a JSON schema.

    Args:
        data: The payload to validate (object or array).
        schema_name: Name of the schema file (without .json extension).
        mode: 'STRICT' (raises error) or 'REVIEW' (logs warning).

    Raises:
        ContractError: If validation fails and mode is STRICT.
    """
    try:
        schema = load_schema(schema_name)
        jsonschema.validate(instance=data, schema=schema)
    except (ValidationError, FileNotFoundError) as e:
        location = ""
        if isinstance(e, ValidationError) and e.absolute_path:
            location = " at " + "/".join(str(part) for part in e.absolute_path)
        msg = f"Data Contract Violation ({schema_name}){location}: {getattr(e, 'message', str(e))}"
        if mode == "STRICT":
            raise ContractError(msg) from e
        logger.warning(msg)
