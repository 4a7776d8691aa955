"""Unit tests for CLI settings and init file loading."""

from __future__ import annotations

from unittest.mock import patch

import pytest
import yaml

from cpinit.components import ExternalComponent, LocalComponent, parse_component_spec
from cpinit.config import (
    CLIConfig,
    load_config,
    load_init_config,
    save_config,
    unset_config,
)
from cpinit.errors import ConfigError


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / ".cpinit" / "config.yaml"
    with patch("cpinit.config.get_config_path", return_value=path):
        yield path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in (
        "CPINIT_KUBECONFIG",
        "CPINIT_READY_TIMEOUT",
        "CPINIT_POLL_INTERVAL",
        "CPINIT_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, config_file):
        config = load_config()
        assert config.kubeconfig is None
        assert config.ready_timeout == 120.0
        assert config.poll_interval == 2.0
        assert config.log_level == "warning"
        assert config.get_source("ready_timeout") == "default"

    def test_config_file(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("ready_timeout: 30\nkubeconfig: /tmp/kc\n")

        config = load_config()

        assert config.ready_timeout == 30.0
        assert config.kubeconfig == "/tmp/kc"
        assert config.get_source("ready_timeout") == "config file"
        assert config.get_source("poll_interval") == "default"

    def test_env_overrides_file(self, config_file, monkeypatch):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("ready_timeout: 30\n")
        monkeypatch.setenv("CPINIT_READY_TIMEOUT", "45")

        config = load_config()

        assert config.ready_timeout == 45.0
        assert config.get_source("ready_timeout") == "environment"

    def test_invalid_env_value(self, config_file, monkeypatch):
        monkeypatch.setenv("CPINIT_POLL_INTERVAL", "soon")
        with pytest.raises(ConfigError, match="poll_interval"):
            load_config()

    def test_unknown_file_key(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("server: http://x\n")
        with pytest.raises(ConfigError, match="unknown config key"):
            load_config()

    def test_values(self):
        assert set(CLIConfig().values()) == {
            "kubeconfig",
            "ready_timeout",
            "poll_interval",
            "log_level",
        }


class TestSaveConfig:
    """Tests for save_config and unset_config."""

    def test_save_and_unset(self, config_file):
        save_config("ready_timeout", "60")
        assert yaml.safe_load(config_file.read_text()) == {"ready_timeout": 60.0}

        assert unset_config("ready_timeout") is True
        assert yaml.safe_load(config_file.read_text()) == {}
        assert unset_config("ready_timeout") is False

    def test_save_rejects_non_positive(self, config_file):
        with pytest.raises(ConfigError, match="must be positive"):
            save_config("ready_timeout", "0")
        assert not config_file.exists()

    def test_unset_without_file(self, config_file):
        assert unset_config("kubeconfig") is False


class TestParseComponentSpec:
    """Tests for parse_component_spec."""

    def test_external(self):
        spec = parse_component_spec("etcd", {"external": {"endpoints": ["https://e:2379"]}})
        assert spec == ExternalComponent(reference={"endpoints": ["https://e:2379"]})

    def test_local_defaults(self):
        spec = parse_component_spec("etcd", None)
        assert isinstance(spec, LocalComponent)
        assert spec.image.startswith("registry.k8s.io/etcd")
        assert spec.replicas == 1

    def test_local_values(self):
        spec = parse_component_spec(
            "apiserver",
            {"local": {"image": "api:1", "replicas": 2, "extra_args": ["--v=2"]}},
        )
        assert spec == LocalComponent(image="api:1", replicas=2, extra_args=["--v=2"])

    def test_both_set(self):
        with pytest.raises(ConfigError, match="exactly one"):
            parse_component_spec("etcd", {"external": {}, "local": {}})

    def test_zero_replicas(self):
        with pytest.raises(ConfigError, match="at least one replica"):
            parse_component_spec("etcd", {"local": {"replicas": 0}})

    def test_empty_extra_args(self):
        spec = parse_component_spec("etcd", {"local": {"extra_args": None, "labels": None}})
        assert spec.extra_args == []
        assert spec.labels == {}

    @pytest.mark.parametrize(
        "raw,match",
        [
            ({"local": "etcd:3.5"}, "'local' must be a mapping"),
            ({"external": ["https://e:2379"]}, "'external' must be a mapping"),
            ({"local": {"extra_args": "--v=2"}}, "'extra_args' must be a list"),
            ({"local": {"labels": ["tier"]}}, "'labels' must be a mapping"),
        ],
    )
    def test_malformed_entries(self, raw, match):
        with pytest.raises(ConfigError, match=match):
            parse_component_spec("etcd", raw)


class TestLoadInitConfig:
    """Tests for load_init_config."""

    def test_full_file(self, tmp_path):
        path = tmp_path / "init.yaml"
        path.write_text(
            yaml.dump(
                {
                    "name": "cp-demo",
                    "namespace": "demo",
                    "components": {
                        "etcd": {"external": {"endpoints": ["https://10.0.0.5:2379"]}},
                        "apiserver": {"local": {"image": "api:1", "replicas": 2}},
                    },
                }
            )
        )

        config = load_init_config(path)

        assert config.name == "cp-demo"
        assert config.namespace == "demo"
        assert isinstance(config.components["etcd"], ExternalComponent)
        assert config.components["apiserver"].replicas == 2

    def test_missing_components_default_to_local(self, tmp_path):
        path = tmp_path / "init.yaml"
        path.write_text("name: cp\n")

        config = load_init_config(path)

        assert config.namespace == "cp-system"
        assert all(isinstance(s, LocalComponent) for s in config.components.values())

    def test_unknown_component(self, tmp_path):
        path = tmp_path / "init.yaml"
        path.write_text("components:\n  scheduler: {}\n")
        with pytest.raises(ConfigError, match="scheduler"):
            load_init_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "init.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_init_config(path)

    def test_null_extra_args_in_file(self, tmp_path):
        path = tmp_path / "init.yaml"
        path.write_text("components:\n  etcd:\n    local:\n      extra_args:\n")

        config = load_init_config(path)

        assert config.components["etcd"].extra_args == []

    def test_local_given_a_string(self, tmp_path):
        path = tmp_path / "init.yaml"
        path.write_text("components:\n  etcd:\n    local: etcd:3.5\n")
        with pytest.raises(ConfigError, match="'local' must be a mapping"):
            load_init_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="cannot read"):
            load_init_config(tmp_path / "nope.yaml")
