"""Configuration loading (YAML file + environment overrides)."""
