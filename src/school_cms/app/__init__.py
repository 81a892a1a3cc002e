from .settings import AppSettings, Env, get_app_settings

__all__ = ["AppSettings", "Env", "get_app_settings"]
