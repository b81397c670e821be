from __future__ import annotations

from pathlib import Path

import pytest
from prompt_console.core.common.exceptions import ConfigurationError
from prompt_console.core.services.localization_service import (
    DictLocalizationService,
    YamlLocalizationService,
    default_resources_dir,
)


class TestYamlLocalizationService:
    def test_bundled_resources_are_found(self) -> None:
        service = YamlLocalizationService()

        assert (default_resources_dir() / "prompt.resources.yaml").exists()
        assert service.get_string("noUsers", "users.resources.yaml") == "No users found."

    def test_missing_key_returns_key(self, tmp_path: Path) -> None:
        (tmp_path / "a.yaml").write_text("Hello: Hi\n", encoding="utf-8")
        service = YamlLocalizationService(tmp_path)

        assert service.get_string("Hello", "a.yaml") == "Hi"
        assert service.get_string("Missing", "a.yaml") == "Missing"

    def test_missing_file_returns_key(self, tmp_path: Path) -> None:
        service = YamlLocalizationService(tmp_path)

        assert service.get_string("Hello", "nope.yaml") == "Hello"

    def test_format_string_uses_positional_placeholders(self, tmp_path: Path) -> None:
        (tmp_path / "a.yaml").write_text(
            "Greeting: \"Hello {0}, you have {1} users\"\nBroken: \"{0} and {5}\"\n",
            encoding="utf-8",
        )
        service = YamlLocalizationService(tmp_path)

        assert service.format_string("Greeting", "a.yaml", "admin", 3) == (
            "Hello admin, you have 3 users"
        )
        # Too few arguments leave the template as is
        assert service.format_string("Broken", "a.yaml", "x") == "{0} and {5}"

    def test_reload_picks_up_changes(self, tmp_path: Path) -> None:
        path = tmp_path / "a.yaml"
        path.write_text("Hello: Hi\n", encoding="utf-8")
        service = YamlLocalizationService(tmp_path)
        assert service.get_string("Hello", "a.yaml") == "Hi"

        path.write_text("Hello: Howdy\n", encoding="utf-8")
        assert service.get_string("Hello", "a.yaml") == "Hi"

        service.reload()
        assert service.get_string("Hello", "a.yaml") == "Howdy"

    def test_invalid_yaml_raises_configuration_error(self, tmp_path: Path) -> None:
        (tmp_path / "bad.yaml").write_text("key: [unclosed\n", encoding="utf-8")
        service = YamlLocalizationService(tmp_path)

        with pytest.raises(ConfigurationError):
            service.get_string("key", "bad.yaml")

    def test_non_mapping_raises_configuration_error(self, tmp_path: Path) -> None:
        (tmp_path / "list.yaml").write_text("- a\n- b\n", encoding="utf-8")
        service = YamlLocalizationService(tmp_path)

        with pytest.raises(ConfigurationError):
            service.get_string("a", "list.yaml")


def test_dict_localization_service() -> None:
    service = DictLocalizationService({"r.yaml": {"Key": "Value {0}"}})

    assert service.get_string("Key", "r.yaml") == "Value {0}"
    assert service.format_string("Key", "r.yaml", 7) == "Value 7"
    assert service.get_string("Other", "r.yaml") == "Other"
    assert service.get_string("Key", "missing.yaml") == "Key"
