"""
Общая инфраструктура тестов uritpl.

Modules:
- yaml_fixtures: загрузка YAML-фикстур из tests/fixtures
"""

from .yaml_fixtures import FIXTURES_DIR, load_yaml, load_rfc_examples, RfcExample

__all__ = ["FIXTURES_DIR", "load_yaml", "load_rfc_examples", "RfcExample"]
