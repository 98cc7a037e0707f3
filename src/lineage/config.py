"""Typed configuration loader for the lineage index."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .contracts.error import BadInputError
from .core.table import DEFAULT_CAPACITY, DEFAULT_LOAD_FACTOR

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


def _parse_bool(raw: Any, label: str) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in _TRUE_WORDS:
            return True
        if normalized in _FALSE_WORDS:
            return False
    raise BadInputError(f"{label} must be boolean")


@dataclass
class TablePolicy:
    initial_capacity: int = DEFAULT_CAPACITY
    load_factor: float = DEFAULT_LOAD_FACTOR

    def validate(self) -> None:
        if isinstance(self.initial_capacity, bool) or not isinstance(self.initial_capacity, int):
            raise BadInputError("table.initial_capacity must be an integer")
        if self.initial_capacity <= 0:
            raise BadInputError("table.initial_capacity must be > 0")
        if not 0.0 < self.load_factor <= 1.0:
            raise BadInputError("table.load_factor must be in (0, 1]")


@dataclass
class LoaderPolicy:
    validate_schema: bool = True
    max_bytes: int = 50 * 1024 * 1024

    def validate(self) -> None:
        if self.max_bytes < 0:
            raise BadInputError("loader.max_bytes must be >= 0 (0 disables the guard)")


@dataclass
class ServicePolicy:
    host: str = "127.0.0.1"
    port: int = 9700

    def validate(self) -> None:
        if not self.host:
            raise BadInputError("service.host must not be empty")
        if not 0 <= self.port <= 65535:
            raise BadInputError("service.port must be within [0, 65535]")


@dataclass
class AppConfig:
    table: TablePolicy = field(default_factory=TablePolicy)
    loader: LoaderPolicy = field(default_factory=LoaderPolicy)
    service: ServicePolicy = field(default_factory=ServicePolicy)

    @classmethod
    def load(cls, path: Path | None) -> AppConfig:
        if path is None:
            cfg = cls()
        else:
            try:
                data = tomllib.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise BadInputError(f"Config file not found: {path}") from exc
            except tomllib.TOMLDecodeError as exc:
                raise BadInputError(f"Invalid TOML: {exc}") from exc
            cfg = cls.from_dict(data)
        cfg.apply_env_overrides(os.environ)
        cfg.validate()
        return cfg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        sections: dict[str, dict[str, Any]] = {}
        for name in ("table", "loader", "service"):
            section = data.get(name, {})
            if not isinstance(section, dict):
                raise BadInputError(f"[{name}] section must be a table")
            sections[name] = dict(section)

        try:
            table = TablePolicy(**sections["table"])
            loader_data = sections["loader"]
            if "validate_schema" in loader_data:
                loader_data["validate_schema"] = _parse_bool(
                    loader_data["validate_schema"], "loader.validate_schema"
                )
            loader = LoaderPolicy(**loader_data)
            service = ServicePolicy(**sections["service"])
        except TypeError as exc:
            raise BadInputError(f"Unknown config key: {exc}") from exc
        return cls(table=table, loader=loader, service=service)

    def apply_env_overrides(self, env: Mapping[str, str]) -> None:
        mapping: dict[str, tuple[object, str, Callable[[str], Any]]] = {
            "LINEAGE_INITIAL_CAPACITY": (self.table, "initial_capacity", int),
            "LINEAGE_LOAD_FACTOR": (self.table, "load_factor", float),
            "LINEAGE_MAX_BYTES": (self.loader, "max_bytes", int),
            "LINEAGE_SERVICE_HOST": (self.service, "host", str),
            "LINEAGE_SERVICE_PORT": (self.service, "port", int),
        }
        for key, (target, attr, caster) in mapping.items():
            raw_value = env.get(key)
            if raw_value is None:
                continue
            try:
                value = caster(raw_value)
            except ValueError as exc:
                raise BadInputError(f"Invalid env override {key}={raw_value!r}") from exc
            setattr(target, attr, value)

        raw_validate = env.get("LINEAGE_VALIDATE_SCHEMA")
        if raw_validate is not None:
            try:
                self.loader.validate_schema = _parse_bool(raw_validate, "LINEAGE_VALIDATE_SCHEMA")
            except BadInputError as exc:
                raise BadInputError(
                    f"Invalid env override LINEAGE_VALIDATE_SCHEMA={raw_validate!r}"
                ) from exc

    def validate(self) -> None:
        self.table.validate()
        self.loader.validate()
        self.service.validate()


def load_app_config(path: str | None) -> AppConfig:
    config_path = Path(path) if path else None
    return AppConfig.load(config_path)
