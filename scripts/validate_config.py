#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from strider_app.config.loader import ConfigLoader
from strider_app.config.validation import ConfigValidator


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)

    print(f"🔍 Validating Strider configuration in {loader.config_dir}...")

    try:
        merged = loader.merge_config()
    except Exception as e:
        print(f"❌ Error reading configuration: {e}")
        sys.exit(1)

    errors = ConfigValidator.validate_config(merged)
    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        sys.exit(1)

    try:
        config = loader.load()
    except ValueError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(f"✅ Configuration is valid")
    print(f"  • closure threshold: {config.loop.closure_threshold_meters}m")
    print(f"  • tick interval: {config.tracking.tick_interval_seconds}s")
    print(f"  • submission: {config.submission.method}")
    sys.exit(0)


if __name__ == "__main__":
    main()
