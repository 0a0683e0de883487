from functools import lru_cache
import json

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _parse_alias_value(value: str) -> dict[str, str]:
    if not value:
        return {}
    raw = value.strip()
    if raw == "":
        return {}
    try:
        parsed = json.loads(raw)
        if isinstance(parsed, dict):
            return {
                str(alias).strip().lower(): str(target).strip().lower()
                for alias, target in parsed.items()
                if str(alias).strip() and str(target).strip()
            }
    except ValueError:
        pass
    aliases: dict[str, str] = {}
    for item in raw.split(","):
        alias, sep, target = item.partition("=")
        if not sep or not alias.strip() or not target.strip():
            continue
        aliases[alias.strip().lower()] = target.strip().lower()
    return aliases


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PREDICTMAP_",
        extra="forbid",
        validate_by_name=True,
        populate_by_name=True,
        protected_namespaces=("settings_",),
    )

    assume_utc_timestamps: bool = True
    debug_log_raw_payload: bool = Field(
        default=False,
        validation_alias=AliasChoices("PREDICTMAP_DEBUG_LOG_RAW_PAYLOAD", "PREDICTMAP_DEBUG_RAW"),
    )

    model_type_aliases_raw: str = Field(
        default="",
        validation_alias=AliasChoices("PREDICTMAP_MODEL_TYPE_ALIASES"),
    )

    @property
    def model_type_aliases(self) -> dict[str, str]:
        return _parse_alias_value(self.model_type_aliases_raw)


@lru_cache
def get_settings() -> Settings:
    return Settings()
