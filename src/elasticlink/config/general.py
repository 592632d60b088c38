from pathlib import Path
from typing import Annotated, ClassVar, override

from pydantic import AfterValidator, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from elasticlink.config.utils import CommentedSettings
from elasticlink.types.general import FieldValidationMode, LogLevel


def uppercase(value: str) -> str:
    """Make a string uppercase."""
    return value.upper()


class GeneralConfig(CommentedSettings):
    """General library config."""

    log_level: Annotated[
        LogLevel,
        AfterValidator(uppercase),
    ] = Field(
        default="INFO",
        description="Level of library logs to print/keep.",
    )
    log_to_file: Annotated[
        bool,
        Field(description="Also write rotating text and JSON logs to log_dir."),
    ] = False
    log_dir: Annotated[
        Path, Field(description="Directory for file logs when log_to_file is set.")
    ] = Path("logs")
    field_validation: Annotated[
        FieldValidationMode,
        Field(
            description="Check field names against the mappings schema: off, warn (log and continue) or strict (raise FieldTypeError)."
        ),
    ] = "warn"

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(  # pyright:ignore[reportIncompatibleVariableOverride]
        case_sensitive=False,
        env_prefix="ELASTICLINK_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        yaml_file="config/config.yaml",
        yaml_file_encoding="utf-8",
    )

    @classmethod
    @override
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Ensure proper setting priority order."""
        return (
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            init_settings,
        )


CONFIG = GeneralConfig()
