"""
Configuration settings for the welding consumables calculator.

Uses Pydantic Settings so every value can come from the environment (or a
`.env` file) with a `WELDCALC_` prefix. Dataset column names live here too:
they are stable identifiers of the pipe table, not something the code should
hard-wire.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatasetColumns(BaseModel):
    """Header names of the tab-delimited pipe table."""

    joint_type: str = "J_type"
    nominal_size: str = "N-SIZE"
    thickness: str = "Thk"
    filler_2_4: str = "Filler Ф2#4"
    electrode_2_5: str = "Elec# Ф2#5"
    electrode_3_25: str = "Elec# Ф3#25"
    electrode_4_0: str = "Elec# Ф4"

    model_config = {"frozen": True}

    def required(self) -> Dict[str, str]:
        """Field name -> column name for columns a dataset must carry."""
        return {
            "nominal_size": self.nominal_size,
            "thickness": self.thickness,
            "filler_2_4": self.filler_2_4,
            "electrode_2_5": self.electrode_2_5,
            "electrode_3_25": self.electrode_3_25,
            "electrode_4_0": self.electrode_4_0,
        }


def _default_history_path() -> Path:
    return Path.home() / ".weldcalc" / "store.json"


class Settings(BaseSettings):
    # Data sources
    dataset_path: Path = Field(Path("data/db.txt"), alias="WELDCALC_DATASET")
    dataset_read_attempts: int = Field(3, alias="WELDCALC_DATASET_READ_ATTEMPTS", ge=1)
    dataset_retry_backoff: float = Field(1.0, alias="WELDCALC_DATASET_RETRY_BACKOFF", ge=0)
    grades_path: Optional[Path] = Field(None, alias="WELDCALC_GRADES")
    columns: DatasetColumns = Field(default_factory=DatasetColumns, alias="WELDCALC_COLUMNS")

    # History store
    history_path: Path = Field(default_factory=_default_history_path, alias="WELDCALC_HISTORY")
    history_key: str = Field("pipeCalculations", alias="WELDCALC_HISTORY_KEY")
    timestamp_format: str = Field("%m/%d/%Y, %I:%M:%S %p", alias="WELDCALC_TIMESTAMP_FORMAT")

    # Exports
    export_dir: Path = Field(Path("."), alias="WELDCALC_EXPORT_DIR")

    # Application
    app_env: str = Field("development", alias="WELDCALC_ENV")
    log_level: str = Field("WARNING", alias="WELDCALC_LOG_LEVEL")
    log_json: bool = Field(False, alias="WELDCALC_LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["DatasetColumns", "Settings", "get_settings"]
