from webcat_shared.infra.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
