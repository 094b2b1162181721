#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List, Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from zen_app.config.loader import ConfigLoader
from zen_app.config.validation import ConfigValidator, ValidationError
from zen_app.routine.builder import build_sequence


def validate_settings(config_dir: Optional[Path] = None) -> List[ValidationError]:
    """Validate the merged settings for a config directory."""
    loader = ConfigLoader.create(config_dir)
    config = loader.merge_config()
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)

    print("🔍 Validating routine configuration...")
    print(f"   Settings file: {loader.settings_path}")

    all_valid = True

    try:
        errors = validate_settings(config_dir)
        if errors:
            print(f"❌ Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            print("✅ Settings are valid")
    except Exception as e:
        print(f"❌ Error validating settings: {e}")
        all_valid = False

    print("\n📋 Building sequence from settings...")
    try:
        sequence = build_sequence(loader.load_routine())
        if sequence.is_empty:
            print("❌ Routine produces no tasks; start would be ignored")
            all_valid = False
        else:
            print(f"✅ {len(sequence)} tasks, {sequence.total_seconds} seconds in total")
            for index, task in enumerate(sequence, start=1):
                print(f"  {index:>3}. {task.kind.value:<5} {task.label:<14} {task.duration_seconds}s")
    except Exception as e:
        print(f"❌ Error building sequence: {e}")
        all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
