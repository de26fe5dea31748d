#!/usr/bin/env python3
"""
Configuration Validation Script

Validates content dedup server configuration files for correctness.
"""

import json
import sys
from pathlib import Path

from content_dedup.config import Config
from content_dedup.deduplication import ContentDeduplicator
from content_dedup.exceptions import ConfigurationError


def validate_config(config_path: str = "config.json") -> bool:
    """Validate configuration file"""
    config_file = Path(config_path)
    if not config_file.exists():
        print(f"ERROR: Configuration file not found: {config_path}")
        return False

    try:
        with open(config_file, 'r') as f:
            raw_config = json.load(f)
    except json.JSONDecodeError as e:
        print(f"ERROR: Invalid JSON in configuration file: {e}")
        return False

    if not isinstance(raw_config, dict):
        print("ERROR: Configuration must be a JSON object")
        return False

    print(f"SUCCESS: Configuration file loaded: {config_path}")

    unknown_sections = [key for key in raw_config if key not in ('deduplication', 'server', 'logging')]
    if unknown_sections:
        print(f"WARNING: Unknown sections will be ignored: {unknown_sections}")

    config = Config(config_path, setup_logging=False)
    errors = []

    try:
        deduplicator = ContentDeduplicator(config.get_deduplication_config())
    except ConfigurationError as e:
        errors.append(f"deduplication: {e.message}")
        deduplicator = None

    server = config.get_server_config()
    port = server.get('port', 8080)
    if not isinstance(port, int) or port < 1 or port > 65535:
        errors.append("server.port must be a valid port number (1-65535)")

    if errors:
        print("ERROR: Configuration errors found:")
        for error in errors:
            print(f"   - {error}")
        return False

    print("SUCCESS: Configuration validation passed!")
    print(f"Similarity threshold: {deduplicator.similarity_threshold}")
    print(f"Default merge policy: {deduplicator.merger.default_policy.model_dump()}")
    print(f"Server: {server.get('host')}:{server.get('port')}")
    return True


def main():
    """Main validation function"""
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.json"

    print(f"Validating content dedup configuration: {config_path}")
    print("=" * 60)

    if validate_config(config_path):
        print("=" * 60)
        print("Configuration is valid and ready to use!")
        sys.exit(0)
    else:
        print("=" * 60)
        print("Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
