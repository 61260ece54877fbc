"""Search settings: YAML loading and schema validation."""
