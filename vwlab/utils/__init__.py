"""
Shared utility functions.

This subpackage includes:
- YAML config loading and project-relative path resolution
- seeding and reproducibility helpers
- lightweight logging helpers used across the project.
"""
