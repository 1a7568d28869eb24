from shared.runtime_settings import (
    DEFAULT_DEV_CORS_ALLOW_ORIGINS,
    env_flag,
    env_int,
    env_str,
    load_runtime_settings,
    parse_cors_allowlist,
)


def test_env_flag_truthy_and_falsey() -> None:
    assert env_flag("X", default=False, environ={"X": "true"}) is True
    assert env_flag("X", default=True, environ={"X": "0"}) is False
    assert env_flag("X", default=True, environ={}) is True


def test_env_flag_unrecognised_value_keeps_default() -> None:
    assert env_flag("X", default=True, environ={"X": "maybe"}) is True
    assert env_flag("X", default=False, environ={"X": " ON "}) is True


def test_env_int_falls_back_on_blank_or_malformed() -> None:
    assert env_int("N", 5, environ={"N": "12"}) == 12
    assert env_int("N", 5, environ={"N": ""}) == 5
    assert env_int("N", 5, environ={"N": "many"}) == 5


def test_env_int_minimum_clamps() -> None:
    assert env_int("N", 5, environ={"N": "0"}, minimum=1) == 1
    assert env_int("N", 5, environ={"N": "-3"}) == -3


def test_env_str_treats_blank_as_unset() -> None:
    assert env_str("S", environ={"S": "  "}) is None
    assert env_str("S", environ={"S": " world.yaml "}) == "world.yaml"


def test_parse_cors_allowlist_uses_fallback_when_empty() -> None:
    assert parse_cors_allowlist("") == list(DEFAULT_DEV_CORS_ALLOW_ORIGINS)
    assert parse_cors_allowlist(" , ", fallback=()) == []


def test_parse_cors_allowlist_parses_csv_values() -> None:
    raw = " http://localhost:3000, https://example.com "
    assert parse_cors_allowlist(raw) == ["http://localhost:3000", "https://example.com"]


def test_load_runtime_settings_reads_expected_keys() -> None:
    settings = load_runtime_settings(
        {
            "REALMSMITH_DEV_MODE": "false",
            "REALMSMITH_CORS_ALLOW_ORIGINS": "https://app.example.com",
            "REALMSMITH_WORLD_FILE": "worlds/ashfall.yaml",
            "REALMSMITH_PROMPTS_DIR": "/srv/prompts",
            "REALMSMITH_USAGE_LOG_CAPACITY": "0",
        }
    )
    assert settings.dev_mode is False
    assert settings.cors_allow_origins == ["https://app.example.com"]
    assert settings.cors_explicit is True
    assert settings.allows_any_origin is False
    assert settings.world_file == "worlds/ashfall.yaml"
    assert settings.prompts_dir == "/srv/prompts"
    assert settings.usage_log_capacity == 1


def test_load_runtime_settings_defaults() -> None:
    settings = load_runtime_settings({})
    assert settings.dev_mode is True
    assert settings.cors_allow_origins == list(DEFAULT_DEV_CORS_ALLOW_ORIGINS)
    assert settings.cors_explicit is False
    assert settings.world_file is None
    assert settings.usage_log_capacity == 1000


def test_wildcard_origin_is_flagged() -> None:
    settings = load_runtime_settings({"REALMSMITH_CORS_ALLOW_ORIGINS": "*"})
    assert settings.allows_any_origin is True
