#!/usr/bin/env python3
"""JSON schema validator for menu permission trees.

Validates tree payloads (already decoded, or JSON files on disk) against the
menu tree schema, and reports duplicate node ids as warnings.
"""

from __future__ import annotations

from collections.abc import Mapping
import json
import logging
from pathlib import Path
import sys
from typing import Any, Optional

from jsonschema import Draft7Validator

from permtree.constants import SCHEMA_DIR

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = SCHEMA_DIR / "menu_tree.schema.json"


class ValidationResult:
    """Result of a tree validation.

    Attributes:
        source: Validated file path or payload label
        errors: Schema violations (make the tree invalid)
        warnings: Suspicious but tolerated content (duplicate ids)
        node_count: Number of node objects found in the tree
        is_valid: Whether validation passed
    """

    def __init__(
        self,
        source: Path | str,
        errors: Optional[list[str]] = None,
        warnings: Optional[list[str]] = None,
        node_count: int = 0,
    ) -> None:
        self.source = source
        self.errors = errors or []
        self.warnings = warnings or []
        self.node_count = node_count
        self.is_valid = len(self.errors) == 0

    def __repr__(self) -> str:
        status = "✅" if self.is_valid else "❌"
        return (
            f"<ValidationResult {status} {self.source} nodes={self.node_count} "
            f"errors={len(self.errors)} warnings={len(self.warnings)}>"
        )


def scan_node_ids(raw_nodes: Any) -> tuple[int, list[int]]:
    """Walk a raw tree of either shape.

    Returns:
        Number of node objects, and ids seen more than once in discovery order
    """
    if not isinstance(raw_nodes, list):
        return 0, []

    node_count = 0
    seen: set[int] = set()
    duplicates: list[int] = []
    stack = list(reversed(raw_nodes))

    while stack:
        raw = stack.pop()
        if not isinstance(raw, Mapping):
            continue
        node_count += 1

        node_id = raw.get("id", raw.get("menuId"))
        if isinstance(node_id, int) and not isinstance(node_id, bool):
            if node_id in seen and node_id not in duplicates:
                duplicates.append(node_id)
            seen.add(node_id)

        children = raw.get("children")
        if isinstance(children, list):
            stack.extend(reversed(children))

    return node_count, duplicates


def find_duplicate_ids(raw_nodes: Any) -> list[int]:
    """Return ids appearing more than once in a raw tree, in discovery order."""
    return scan_node_ids(raw_nodes)[1]


class TreeValidator:
    """Validates menu trees from payloads, files or whole directories."""

    def __init__(self, schema_path: Path = DEFAULT_SCHEMA_PATH) -> None:
        """Initialize validator with a schema.

        Args:
            schema_path: Path to JSON schema file

        Raises:
            FileNotFoundError: If schema file doesn't exist
            json.JSONDecodeError: If schema is invalid JSON
        """
        self.schema_path = schema_path
        self.schema = self._load_schema()
        self.validator = Draft7Validator(self.schema)

        logger.debug(f"Schema loaded: {schema_path}")

    def _load_schema(self) -> dict:
        if not self.schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {self.schema_path}")

        try:
            with self.schema_path.open(encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid schema JSON: {e}")
            raise

    def validate_data(self, data: Any, source: Path | str = "<payload>") -> ValidationResult:
        """Validate an already decoded tree payload.

        Args:
            data: Decoded JSON (expected: list of nodes)
            source: Label used in the result

        Returns:
            ValidationResult with errors and warnings
        """
        errors = []
        for error in sorted(self.validator.iter_errors(data), key=lambda e: list(e.path)):
            path = ".".join(str(p) for p in error.path) or "root"
            errors.append(f"{path}: {error.message}")

        node_count, duplicates = scan_node_ids(data)
        warnings = [f"duplicate node id: {node_id}" for node_id in duplicates]

        return ValidationResult(source, errors, warnings, node_count)

    def validate_file(self, file_path: Path) -> ValidationResult:
        """Validate a single tree JSON file (bare list or response envelope)."""
        try:
            with file_path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            return ValidationResult(file_path, [f"Invalid JSON syntax: {e}"])
        except OSError as e:
            return ValidationResult(file_path, [f"Cannot read file: {e}"])

        if isinstance(data, dict) and "data" in data:
            data = data["data"]

        return self.validate_data(data, file_path)

    def validate_target(self, target: Path, pattern: str = "*.json") -> list[ValidationResult]:
        """Validate one tree file, or every matching tree file of a directory."""
        if target.is_dir():
            files = sorted(target.glob(pattern))
            logger.info(f"Validating {len(files)} tree files in {target}")
        elif target.is_file():
            files = [target]
        else:
            logger.error(f"Target not found: {target}")
            return []

        return [self.validate_file(file_path) for file_path in files]


def print_results(results: list[ValidationResult]) -> int:
    """Print one line per tree with its node and duplicate counts.

    Returns:
        Number of invalid trees
    """
    invalid = [result for result in results if not result.is_valid]

    for result in results:
        icon = "✅" if result.is_valid else "❌"
        print(f"{icon} {result.source}: {result.node_count} nodes, {len(result.warnings)} duplicate ids")
        for error in result.errors:
            print(f"  → {error}")
        for warning in result.warnings:
            print(f"  ⚠ {warning}")

    if len(results) > 1:
        node_total = sum(result.node_count for result in results)
        print(f"\n{len(results) - len(invalid)}/{len(results)} trees valid, {node_total} nodes checked")

    return len(invalid)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the tree validator.

    Returns:
        Exit code (0 for success, 1 for validation failures)
    """
    args = sys.argv[1:] if argv is None else argv

    if not args or args[0] in ("-h", "--help"):
        print("Usage: permtree-validate <file_or_dir> [schema.json]")
        print("\nValidate menu tree JSON files.")
        print("\nArguments:")
        print("  file_or_dir   Path to JSON file or directory containing JSON files")
        print("  schema.json   Optional schema (defaults to the bundled menu tree schema)")
        return 0 if args else 1

    target_path = Path(args[0])
    schema_path = Path(args[1]) if len(args) > 1 else DEFAULT_SCHEMA_PATH

    if not target_path.exists():
        logger.error(f"Target not found: {target_path}")
        return 1

    try:
        validator = TreeValidator(schema_path)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load schema: {e}")
        return 1

    results = validator.validate_target(target_path)
    if not results:
        print(f"No tree files found in {target_path}")
        return 0

    return 1 if print_results(results) else 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    sys.exit(main())
