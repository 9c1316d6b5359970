from counting.conf.get_settings import get_settings
from counting.conf.settings import CountingSettings

__all__ = ['CountingSettings', 'get_settings']
