"""Test package marker so fakes import as `tests.utils.*` without PYTHONPATH tweaks."""
