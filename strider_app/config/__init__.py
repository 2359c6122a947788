"""
Configuration module.

Typed defaults, YAML overrides and validation for the run tracker.
"""
