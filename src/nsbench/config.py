import logging
import os
from typing import Any

import dns.exception
import dns.name
import dns.rdatatype
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, IPvAnyAddress, ValidationError, field_validator

from .errors import ConfigError
from .utils import default_worker_count

logger = logging.getLogger(__name__)

ENV_PREFIX = "NSBENCH_"


class BenchConfig(BaseModel):
    """Validated inputs of one benchmark run."""

    nameserver: IPvAnyAddress
    host: str
    port: int = Field(default=53, ge=1, le=65535)
    record_type: str = "A"
    timeout_s: float = Field(default=0.0005, gt=0)  # 500000ns
    duration_s: float = Field(default=60.0, ge=0)
    workers: int = Field(default_factory=default_worker_count, ge=0)
    ready_timeout_s: float = Field(default=10.0, gt=0)
    sample_interval_s: float = Field(default=1.0, gt=0)

    @field_validator("host")
    @classmethod
    def _valid_host(cls, v: str) -> str:
        try:
            name = dns.name.from_text(v)
        except dns.exception.DNSException as e:
            raise ValueError(f"invalid DNS name {v!r}: {e}") from e
        if name == dns.name.root:
            raise ValueError(f"host must not be empty or the root name, got {v!r}")
        return v

    @field_validator("record_type")
    @classmethod
    def _valid_record_type(cls, v: str) -> str:
        try:
            return dns.rdatatype.to_text(dns.rdatatype.from_text(v.upper()))
        except dns.exception.DNSException as e:
            raise ValueError(f"unknown record type {v!r}") from e

    @classmethod
    def build(cls, **values: Any) -> "BenchConfig":
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(str(e)) from e

    @classmethod
    def from_env(cls, dotenv_path: str | None = None, **overrides: Any) -> "BenchConfig":
        """Read NSBENCH_* variables (after loading a .env file), then apply non-None overrides."""
        # look in the working directory, not beside this module
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            raw = os.getenv(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        logger.debug(f"Config sources: {sorted(values)}")
        return cls.build(**values)
