import pytest

from srm_cmdlets.core.config import SrmConfig, create_config, load_config
from srm_cmdlets.core.exceptions import ValidationError


def test_defaults():
    config = SrmConfig()
    assert config.task_timeout is None
    assert config.confirm is True
    assert config.output_format == 'table'


def test_create_config_rejects_unknown_options():
    with pytest.raises(ValidationError) as exc_info:
        create_config(task_timeout=10, colour='blue')
    assert 'colour' in str(exc_info.value)


@pytest.mark.parametrize('options', [
    {'task_timeout': 0},
    {'task_poll_interval': -1},
    {'log_level': 'LOUD'},
    {'output_format': 'xml'},
    {'connector': 'no_colon'},
])
def test_invalid_values(options):
    with pytest.raises(ValidationError):
        create_config(**options)


def test_load_yaml(tmp_path):
    path = tmp_path / 'srm.yaml'
    path.write_text(
        "task_timeout: 1800\n"
        "confirm: false\n"
        "connector: my_bindings.srm:connect\n"
    )

    config = load_config(str(path))

    assert config.task_timeout == 1800
    assert config.confirm is False
    assert config.connector == 'my_bindings.srm:connect'


def test_load_empty_file(tmp_path):
    path = tmp_path / 'empty.yaml'
    path.write_text("")
    assert load_config(str(path)) == SrmConfig()


@pytest.mark.parametrize('content', ["- a\n- b\n", "task_timeout: [1\n"])
def test_load_rejects_bad_files(tmp_path, content):
    path = tmp_path / 'bad.yaml'
    path.write_text(content)
    with pytest.raises(ValidationError):
        load_config(str(path))


def test_load_missing_file(tmp_path):
    with pytest.raises(ValidationError):
        load_config(str(tmp_path / 'missing.yaml'))
