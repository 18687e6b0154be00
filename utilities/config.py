import logging
from typing import Dict, List, Literal, Optional

from box import Box
from pydantic import BaseModel, Field, ValidationError
from ruamel.yaml import YAML

DEFAULT_CONFIG_PATH = 'configuration/config.yaml'


# --- Configuration Models ---

class BotConfig(BaseModel):
    """Defines the 'bot' section of the config."""
    short_name: str
    full_name: str
    prefix: str
    # Supports a list of IDs, Nones, or a mix.
    owner_ids: List[Optional[int]] = []
    testing_guild: Optional[int] = None


class LoggingConfig(BaseModel):
    """Defines the 'logging' section."""
    console_level: Literal["debug", "info", "warning", "error", "critical"]
    output_level: Literal["debug", "info", "warning", "error", "critical"]
    output_folder: Optional[str] = None


class CounterConfig(BaseModel):
    """Defines the 'counter' section: text commands and reply rendering."""
    command_prefix: str = "!emoji"
    placeholder_name: str = "User"
    max_ranking_entries: int = Field(0, ge=0)  # 0 = show everyone
    compact_mode: bool = False


class PersistenceConfig(BaseModel):
    """Defines the 'persistence' section. Snapshots are off unless enabled."""
    enabled: bool = False
    url: str = "sqlite://db.sqlite3"
    autosave_seconds: int = Field(300, ge=10)


class EmbedColors(BaseModel):
    """Defines the 'embed_colors' sub-section."""
    default: int
    success: int
    error: int
    warning: int
    info: int


class Emojis(BaseModel):
    """Defines the 'emojis' sub-section."""
    success: str
    error: str
    warning: str
    info: str


class StyleConfig(BaseModel):
    """Defines the 'style' section."""
    embed_colors: EmbedColors
    emojis: Emojis


class CogDetails(BaseModel):
    """Defines the structure for a single cog entry."""
    # We use 'alias' because 'class' is a reserved keyword in Python
    class_name: str = Field(..., alias="class")
    enabled: bool


class Config(BaseModel):
    """
    The main Pydantic model for validating the entire config.yaml file.
    """
    bot: BotConfig
    auth: Optional[str] = None
    logging: LoggingConfig
    counter: CounterConfig = CounterConfig()
    persistence: PersistenceConfig = PersistenceConfig()
    style: StyleConfig
    # A list where each item is a dictionary, e.g., {"cogs.emoji_counter": {...}}
    cogs: List[Dict[str, CogDetails]]


def get_config(file_path: str = DEFAULT_CONFIG_PATH) -> Box:
    """
    Loads a YAML configuration file, validates it using Pydantic, and returns it as a Box object.

    Args:
        file_path: Path to the YAML file.

    Returns:
        Box: The configuration as a dot-accessible object.

    Raises:
        FileNotFoundError: If the file is not found.
        ValueError: If the file is empty.
        ValidationError: If the config does not match the schema.
    """
    logger = logging.getLogger("emoji_counter.configuration")
    yaml = YAML(typ='safe')

    try:
        with open(file_path, 'r', encoding="utf-8") as file:
            raw_config = yaml.load(file)
    except FileNotFoundError:
        logger.critical(f"Error: The config file at '{file_path}' was not found.")
        raise

    if not raw_config:
        logger.critical(f"Error: The config file at '{file_path}' is empty.")
        raise ValueError("Config file is empty.")

    try:
        validated_config = Config(**raw_config)
    except ValidationError as e:
        logger.critical(f"Config validation failed:\n{e}")
        raise

    # Dump with aliases to keep the 'class' key, then wrap in a Box
    config_dict = validated_config.model_dump(by_alias=True)
    return Box(config_dict, frozen_box=True, default_box=True, default_box_attr=None)
