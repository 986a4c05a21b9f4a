from __future__ import annotations

import pydantic
import pytest

from wheremap.settings import CrudSettings


def test_defaults() -> None:
    settings = CrudSettings()
    assert settings.locale == "en"
    assert settings.flash is True
    assert settings.deleted_at_column == "deleted_at"
    assert settings.strict_operators is True


def test_frozen() -> None:
    settings = CrudSettings()
    with pytest.raises(pydantic.ValidationError):
        settings.flash = False  # type: ignore[misc]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"locale": "english!"},
        {"deleted_at_column": "deleted at"},
        {"unknown": 1},
    ],
)
def test_rejects_invalid_values(kwargs: dict[str, object]) -> None:
    with pytest.raises(pydantic.ValidationError):
        CrudSettings(**kwargs)  # type: ignore[arg-type]


def test_model_copy_overrides() -> None:
    settings = CrudSettings(locale="zh_CN").model_copy(update={"flash": False})
    assert settings.locale == "zh_CN"
    assert settings.flash is False
