from __future__ import annotations

import pytest

from shadcn_registry.errors import ValidationError
from shadcn_registry.naming import (
    name_error,
    to_hook_function_name,
    to_pascal_case,
    validate_item_name,
    validate_style,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("my-block", "MyBlock"),
        ("status-badge", "StatusBadge"),
        ("button", "Button"),
        ("faq-panel-2", "FaqPanel2"),
    ],
)
def test_to_pascal_case(name: str, expected: str) -> None:
    assert to_pascal_case(name) == expected
    assert to_pascal_case(name).lower() == name.replace("-", "")


def test_to_hook_function_name() -> None:
    assert to_hook_function_name("use-my-hook") == "useMyHook"
    assert to_hook_function_name("use-theme") == "useTheme"


@pytest.mark.parametrize("name", ["a", "status-badge", "x1", "card-2-col"])
def test_valid_component_names(name: str) -> None:
    assert name_error("component", name) is None
    assert name_error("block", name) is None


@pytest.mark.parametrize("name", ["Status", "1abc", "-abc", "my_block", "my block"])
def test_invalid_component_names(name: str) -> None:
    assert name_error("component", name) == "Use kebab-case (e.g. my-component)"


def test_empty_name_is_required() -> None:
    assert name_error("component", "") == "Component name is required!"
    assert name_error("hook", "") == "Hook name is required!"


def test_hook_names_need_use_prefix() -> None:
    assert name_error("hook", "use-theme") is None
    assert name_error("hook", "theme") == "Use use-<name> format (e.g. use-my-hook)"
    assert name_error("hook", "use-") is not None


def test_validate_item_name_raises_validation_error() -> None:
    with pytest.raises(ValidationError, match="kebab-case"):
        validate_item_name("block", "FaqPanel")
    assert validate_item_name("block", "faq-panel") == "faq-panel"


def test_validate_style() -> None:
    assert validate_style("default") == "default"
    with pytest.raises(ValidationError, match="new-york"):
        validate_style("other")
