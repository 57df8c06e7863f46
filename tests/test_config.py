import json

import pytest

from npm_importmap.config import CONFIG_PATH_ENV_VAR, GeneratorOptions, load_options
from npm_importmap.errors import ConfigError


def _write(tmp_path, data):
    path = tmp_path / "importmap.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_without_config(monkeypatch):
    monkeypatch.delenv(CONFIG_PATH_ENV_VAR, raising=False)

    options = load_options()

    assert options == GeneratorOptions()
    assert options.include_dependencies is True
    assert options.include_dev_dependencies is True
    assert options.include_optional_dependencies is False
    assert options.conditions == ("module",)
    assert options.fetch_attempts == 1


def test_load_from_explicit_path(tmp_path):
    path = _write(
        tmp_path,
        {
            "includeDevDependencies": False,
            "includeOptionalDependencies": True,
            "cdnBase": "https://cdn.example.com/npm/",
            "conditions": ["browser", "module"],
            "timeout": 5,
            "fetchAttempts": 3,
        },
    )

    options = load_options(path)

    assert options.include_dev_dependencies is False
    assert options.include_optional_dependencies is True
    assert options.cdn_base == "https://cdn.example.com/npm"
    assert options.conditions == ("browser", "module")
    assert options.timeout == 5.0
    assert options.fetch_attempts == 3


def test_load_from_env_var(tmp_path, monkeypatch):
    path = _write(tmp_path, {"includeDependencies": False})
    monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(path))

    assert load_options().include_dependencies is False


@pytest.mark.parametrize(
    "data, message",
    [
        ({"includeDependencies": "yes"}, "must be a boolean"),
        ({"cdnBase": "ftp://cdn"}, "http"),
        ({"conditions": "module"}, "array"),
        ({"timeout": 0}, "positive"),
        ({"fetchAttempts": 0}, ">= 1"),
        ({"includeDependencys": True}, "Unknown option"),
    ],
)
def test_invalid_options(tmp_path, data, message):
    with pytest.raises(ConfigError, match=message):
        load_options(_write(tmp_path, data))


def test_missing_or_malformed_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_options(tmp_path / "nope.json")

    path = tmp_path / "bad.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(ConfigError, match="not valid JSON"):
        load_options(path)

    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ConfigError, match="JSON object"):
        load_options(path)


def test_with_overrides_ignores_none():
    options = GeneratorOptions().with_overrides(
        include_dependencies=None, include_optional_dependencies=True
    )

    assert options.include_dependencies is True
    assert options.include_optional_dependencies is True
