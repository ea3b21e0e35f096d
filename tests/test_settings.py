"""Unit tests for Settings."""
import pytest

from events.settings import Settings


def test_from_env_defaults():
    """Test defaults when no variables are set."""
    settings = Settings.from_env({})

    assert settings.table_name == 'events'
    assert settings.store_backend == 'dynamodb'
    assert settings.log_level == 'INFO'
    assert settings.max_page_size == 100
    assert settings.aws_region is None


def test_from_env_overrides():
    """Test reading every supported variable."""
    settings = Settings.from_env({
        'TABLE_NAME': 'team-events',
        'STORE_BACKEND': 'Memory',
        'LOG_LEVEL': 'DEBUG',
        'MAX_PAGE_SIZE': '25',
        'AWS_REGION': 'eu-west-1',
    })

    assert settings.table_name == 'team-events'
    assert settings.store_backend == 'memory'
    assert settings.log_level == 'DEBUG'
    assert settings.max_page_size == 25
    assert settings.aws_region == 'eu-west-1'


def test_from_env_rejects_unknown_backend():
    with pytest.raises(ValueError):
        Settings.from_env({'STORE_BACKEND': 'redis'})


@pytest.mark.parametrize('value', ['0', '-3', 'ten'])
def test_from_env_rejects_bad_page_size(value):
    with pytest.raises(ValueError):
        Settings.from_env({'MAX_PAGE_SIZE': value})
