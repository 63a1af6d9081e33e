"""Configuration loading for the SRES optimizer (YAML + pydantic schema)."""
