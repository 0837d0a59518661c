import pytest

from config import AppConfig, load_config


def test_defaults_from_empty_environment():
    config = load_config({})

    assert config == AppConfig()
    assert config.image_provider == 'huggingface'
    assert config.max_batch_size == 4
    assert not config.has_api_key
    assert not config.auth_configured


def test_environment_overrides():
    config = load_config({
        'HUGGINGFACE_API_KEY': 'hf_123',
        'IMAGE_PROVIDER': 'OpenAI',
        'ENABLE_IMAGE_GEN': 'false',
        'MAX_BATCH_SIZE': '8',
        'SHOW_DEBUG': 'yes',
        'SUPABASE_URL': 'https://project.supabase.co',
        'SUPABASE_ANON_KEY': 'anon',
        'TRAIT_CATALOG_FILE': 'traits.json',
        'PRESET_STORE_PATH': '/tmp/store.json',
        'LOG_LEVEL': 'debug',
    })

    assert config.has_api_key
    assert config.image_provider == 'openai'
    assert config.enable_image_generation is False
    assert config.max_batch_size == 8
    assert config.show_debug_info is True
    assert config.auth_configured
    assert config.trait_catalog_file == 'traits.json'
    assert config.preset_store_path == '/tmp/store.json'
    assert config.log_level == 'DEBUG'


@pytest.mark.parametrize('env', [
    {'IMAGE_PROVIDER': 'midjourney'},
    {'MAX_BATCH_SIZE': 'many'},
    {'MAX_BATCH_SIZE': '0'},
    {'SHOW_DEBUG': 'maybe'},
    {'LOG_LEVEL': 'LOUD'},
])
def test_invalid_values_rejected(env):
    with pytest.raises(ValueError):
        load_config(env)
