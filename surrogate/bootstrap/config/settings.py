from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from surrogate.bootstrap.config.loader import get_configfile


class StorageSettings(BaseModel):
    backend: Annotated[
        Literal["file", "lmdb"],
        Field(
            description=(
                "Durable byte store used for round trips.\n"
                "  file → one file per blob inside `path`\n"
                "  lmdb → one LMDB environment rooted at `path`"
            ),
            default="file"
        )
    ]

    path: Annotated[
        Path,
        Field(
            description=(
                "Directory holding the persisted bytes.\n"
                "Defaults to the current working directory."
            ),
            default_factory=Path.cwd
        )
    ]

    name: Annotated[
        str,
        Field(
            description="Name of the blob written and read back during a round trip.",
            default="_serialized"
        )
    ]

    map_size: Annotated[
        int,
        Field(
            description="Maximum size of the LMDB map, in bytes. Ignored by the file backend.",
            default=1 << 24,
            gt=0
        )
    ]

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or Path(v).name != v:
            raise ValueError(f"Blob name {v!r} must be a plain file name.")
        return v


class LoggingSettings(BaseModel):
    level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        Field(
            description=(
                "Logging verbosity.\n"
                "INFO shows every surrogate substitution, DEBUG adds storage details."
            ),
            default="INFO"
        )
    ]


class SurrogateConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SURROGATE_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    storage: Annotated[
        StorageSettings,
        Field(
            description="Durable byte store configuration.",
            default_factory=StorageSettings
        )
    ]

    logging: Annotated[
        LoggingSettings,
        Field(
            description="Logging configuration.",
            default_factory=LoggingSettings
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources = [init_settings, env_settings]

        configfile = get_configfile()
        if configfile is not None:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=configfile))

        return tuple(sources)
