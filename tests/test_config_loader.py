"""Tests for configuration loading and validation."""

import copy
import json

import pytest

from pgnbrowser.config.config_loader import ConfigLoader


def test_bundled_config_is_valid():
    config = ConfigLoader().load()

    assert config['browser']['style_filename'] is None
    assert len(config['browser']['white_square_images']) == 13
    assert 'console' in config['logging']


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigLoader(tmp_path / "nope.json").load()


def test_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError):
        ConfigLoader(path).load()


@pytest.mark.parametrize("section", ["logging", "browser"])
def test_missing_section(config, section):
    broken = copy.deepcopy(config)
    del broken[section]

    with pytest.raises(ValueError, match=section):
        ConfigLoader.validate(broken)


def test_missing_browser_key(config):
    broken = copy.deepcopy(config)
    del broken['browser']['image_prefix']

    with pytest.raises(ValueError, match="browser.image_prefix"):
        ConfigLoader.validate(broken)


def test_custom_config_file(tmp_path, config):
    custom = copy.deepcopy(config)
    custom['browser']['image_prefix'] = "pieces/"
    path = tmp_path / "custom.json"
    path.write_text(json.dumps(custom), encoding="utf-8")

    assert ConfigLoader(path).load()['browser']['image_prefix'] == "pieces/"
