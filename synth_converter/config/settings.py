"""
Configuration management for synth-converter.
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from synth_converter.triples.namespaces import DEFAULT_NAMESPACES

DEFAULT_CONFIG_PATH = Path(__file__).with_name("config.yaml")


class NamespacesConfig(BaseModel):
    """RDF namespaces configuration.

    Base IRIs must match the ontology bit-for-bit; change them only to follow
    an ontology release.
    """

    model_config = ConfigDict(populate_by_name=True)

    cat: str = DEFAULT_NAMESPACES["cat"]
    allores: str = DEFAULT_NAMESPACES["allores"]
    alloqual: str = DEFAULT_NAMESPACES["alloqual"]
    qudt: str = DEFAULT_NAMESPACES["qudt"]
    purl: str = DEFAULT_NAMESPACES["purl"]
    obo: str = DEFAULT_NAMESPACES["obo"]
    schema_: str = Field(default=DEFAULT_NAMESPACES["schema"], alias="schema")
    rdf: str = DEFAULT_NAMESPACES["rdf"]
    xsd: str = DEFAULT_NAMESPACES["xsd"]
    catres: str = DEFAULT_NAMESPACES["catres"]

    def as_bindings(self) -> dict[str, str]:
        """Prefix -> base IRI mapping for the namespace registry."""
        return self.model_dump(by_alias=True)


class IdentityConfig(BaseModel):
    """Node identity configuration."""

    # "blank": anonymous action nodes; "named": <catres>AddAction_1, ...
    action_nodes: Literal["blank", "named"] = "blank"
    resource_prefix: str = "catres"


class PathsConfig(BaseModel):
    """Project paths configuration."""

    input_dir: Path = Path("./data")
    output_dir: Path = Path("./output")


class OutputConfig(BaseModel):
    """Output configuration."""

    formats: list[Literal["turtle", "json-ld"]] = Field(
        default_factory=lambda: ["turtle", "json-ld"]
    )
    jsonld_indent: int = Field(default=2, ge=0)
    save_metadata: bool = True


class Settings(BaseSettings):
    """Main configuration class."""

    model_config = SettingsConfigDict(
        env_prefix="SYNTH_",
        env_nested_delimiter="__",
    )

    namespaces: NamespacesConfig = Field(default_factory=NamespacesConfig)
    identity: IdentityConfig = Field(default_factory=IdentityConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def load_config(config_path: str | Path = DEFAULT_CONFIG_PATH) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Settings object with loaded configuration
    """
    config_file = Path(config_path)

    if config_file.exists():
        with open(config_file, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f) or {}
    else:
        config_dict = {}

    # Create settings, which will also load from environment variables
    settings = Settings(**config_dict)

    return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings instance."""
    global _settings
    _settings = None
