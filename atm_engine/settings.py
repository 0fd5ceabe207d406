import os

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .db import default_db_path
from .errors import ConfigurationError


def _log_dir() -> str:
    return os.environ.get("ATM_LOG_DIR", os.path.join(os.getcwd(), "logs"))


class TechnicianCredentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    tech_id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    def matches(self, tech_id: str, password: str) -> bool:
        return self.tech_id == tech_id and self.password == password


class ATMSettings(BaseModel):
    """Device configuration, handed to the engine at construction."""

    model_config = ConfigDict(frozen=True)

    db_path: str = Field(default_factory=default_db_path)
    log_dir: str = Field(default_factory=_log_dir)
    log_level: str = "INFO"
    initial_cash: int = Field(5000, ge=0)
    technicians: tuple[TechnicianCredentials, ...] = (
        TechnicianCredentials(tech_id="admin", password="admin123"),
    )
    allow_auto_register: bool = True
    paper_cost: int = Field(1, ge=1)
    ink_cost: int = Field(1, ge=1)
    low_threshold: int = Field(10, ge=0)
    max_level: int = Field(100, ge=1)

    @classmethod
    def from_env(cls) -> "ATMSettings":
        """Build settings from ATM_* environment variables, falling back to defaults."""
        env = os.environ
        values: dict = {}
        ints = {
            "ATM_INITIAL_CASH": "initial_cash",
            "ATM_PAPER_COST": "paper_cost",
            "ATM_INK_COST": "ink_cost",
            "ATM_LOW_THRESHOLD": "low_threshold",
            "ATM_MAX_LEVEL": "max_level",
        }
        for var, name in ints.items():
            if var in env:
                values[name] = env[var]
        if "ATM_LOG_LEVEL" in env:
            values["log_level"] = env["ATM_LOG_LEVEL"].upper()
        if "ATM_ALLOW_AUTO_REGISTER" in env:
            values["allow_auto_register"] = env["ATM_ALLOW_AUTO_REGISTER"].strip().lower() in {"1", "true", "yes"}
        tech_id = env.get("ATM_TECH_ID")
        tech_pass = env.get("ATM_TECH_PASSWORD")
        if tech_id or tech_pass:
            if not (tech_id and tech_pass):
                raise ConfigurationError("ATM_TECH_ID and ATM_TECH_PASSWORD must be set together")
            values["technicians"] = (TechnicianCredentials(tech_id=tech_id, password=tech_pass),)
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e
