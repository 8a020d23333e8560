from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ATTRUTIL_", env_parse_none_str="none")

    default_package: str = "main"
    memoize_maxsize: Optional[int] = None   # None: unbounded
    install_signal_hooks: bool = True
