#!/usr/bin/env python3
"""
Validate fleet snapshot YAML files.

Two passes per file:
1. Structure against the JSON schema in schema.yaml
2. References: every *_id must name a record in its target section
"""
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError

# (section, field) -> section the field points at
REFERENCES = {
    ("vehicles", "hire_provider_id"): "hire_providers",
    ("plans", "vehicle_id"): "vehicles",
    ("plans", "maintenance_template_id"): "templates",
    ("prestarts", "vehicle_id"): "vehicles",
    ("defects", "prestart_id"): "prestarts",
    ("incidents", "vehicle_id"): "vehicles",
    ("downtime_events", "vehicle_id"): "vehicles",
    ("downtime_events", "hire_provider_id"): "hire_providers",
}


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def check_references(data: dict) -> list[str]:
    """
    Find references to records that are not in the snapshot.

    Ids compare as strings, matching how the loader reads them, so 1 and
    "1" name the same record.
    """
    ids = {
        section: {str(item["id"]) for item in data.get(section) or []}
        for section in set(REFERENCES.values())
    }
    errors = []
    for (section, field), target in REFERENCES.items():
        for i, item in enumerate(data.get(section) or []):
            value = item.get(field)
            if value is not None and str(value) not in ids[target]:
                errors.append(
                    f"Reference error: {section}.{i}.{field} '{value}' not found in {target}"
                )
    return errors


def validate_snapshot_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single snapshot YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=data, schema=schema)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    else:
        errors.extend(check_references(data))
    return errors


def main(argv=None):
    """Validate the snapshot files given, or all files in snapshots/."""
    schema = load_schema()
    paths = [Path(p) for p in (argv if argv is not None else sys.argv[1:])]

    if not paths:
        snapshots_dir = Path(__file__).parent / "snapshots"
        if not snapshots_dir.exists():
            print(f"Error: snapshots directory not found: {snapshots_dir}")
            return 1
        paths = list(snapshots_dir.glob("*.yaml")) + list(snapshots_dir.glob("*.yml"))
        if not paths:
            print(f"Warning: No YAML files found in {snapshots_dir}")
            return 0

    all_valid = True
    for filepath in sorted(paths):
        errors = validate_snapshot_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
