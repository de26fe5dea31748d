from .manager import Config, DEFAULT_CONFIG, CONFIG_ENV_VAR

__all__ = ['Config', 'DEFAULT_CONFIG', 'CONFIG_ENV_VAR']
