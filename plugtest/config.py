"""Persistent settings stored in an INI file and the application configuration."""

from __future__ import annotations

import configparser
from dataclasses import dataclass, field
from pathlib import Path

DATA_DIR_NAME = ".PlugTest"
SETTINGS_FILE_NAME = "sysconfig.ini"
DEFAULT_GROUP = "System"

SNMP_SIZE = 3
RTU_CMD_SIZE = 4
DEFAULT_DELAY = 10


def data_path(name: str, home: str | Path | None = None) -> Path:
    """Return the path of ``name`` inside the data directory, creating the directory."""
    base = Path(home) if home is not None else Path.home()
    directory = base / DATA_DIR_NAME
    directory.mkdir(parents=True, exist_ok=True)
    return (directory / name).absolute()


class SettingsFile:
    """Grouped key/value settings kept in an INI file."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else data_path(SETTINGS_FILE_NAME)
        self._parser = configparser.RawConfigParser()
        self._parser.optionxform = str  # type: ignore[assignment]
        if self.path.exists():
            self._parser.read(self.path, encoding="utf-8")

    def read_str(self, name: str, group: str = DEFAULT_GROUP) -> str:
        """Return the stored text, or an empty string when absent."""
        return self._parser.get(group, name, fallback="")

    def read_int(self, name: str, group: str = DEFAULT_GROUP) -> int:
        """Return the stored integer, or -1 when absent or not an integer."""
        text = self.read_str(name, group).strip()
        if "_" in text:
            return -1
        try:
            return int(text)
        except ValueError:
            return -1

    def read_float(self, name: str, group: str = DEFAULT_GROUP) -> float:
        """Return the stored number, or -1 when absent or not a number."""
        text = self.read_str(name, group).strip()
        if "_" in text:
            return -1.0
        try:
            return float(text)
        except ValueError:
            return -1.0

    def write(self, name: str, value: object, group: str = DEFAULT_GROUP) -> None:
        """Store ``value`` as text and write the file to disk."""
        if not self._parser.has_section(group):
            self._parser.add_section(group)
        self._parser.set(group, name, str(value))
        self._sync()

    def _sync(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            self._parser.write(handle)


@dataclass
class ConfigItem:
    """Connection and command settings of the test bench."""

    ip: str = ""
    com: str = ""
    delay: int = DEFAULT_DELAY
    open_cmds: list[str] = field(default_factory=lambda: [""] * RTU_CMD_SIZE)
    close_cmds: list[str] = field(default_factory=lambda: [""] * RTU_CMD_SIZE)
    rtu_cmd_en: list[int] = field(default_factory=lambda: [0] * RTU_CMD_SIZE)
    snmp_en: list[int] = field(default_factory=lambda: [0] * SNMP_SIZE)
    oids: list[str] = field(default_factory=lambda: [""] * SNMP_SIZE)


class Config:
    """Loads and saves a :class:`ConfigItem` through a :class:`SettingsFile`."""

    def __init__(self, settings: SettingsFile | None = None, prefix: str = "con") -> None:
        self.settings = settings if settings is not None else SettingsFile()
        self.prefix = prefix
        self.item = self.load()

    def _key(self, suffix: str) -> str:
        return f"{self.prefix}_{suffix}"

    def _read_str(self, suffix: str) -> str:
        return self.settings.read_str(self._key(suffix), self.prefix)

    def _read_flag(self, suffix: str) -> int:
        return max(self.settings.read_int(self._key(suffix), self.prefix), 0)

    def _write(self, suffix: str, value: object) -> None:
        self.settings.write(self._key(suffix), value, self.prefix)

    def load(self) -> ConfigItem:
        """Read the configuration from the settings file."""
        delay = self.settings.read_int(self._key("push_time"), self.prefix)
        item = ConfigItem(
            ip=self._read_str("ip_addr"),
            com=self._read_str("com_name"),
            delay=delay if delay > 0 else DEFAULT_DELAY,
            open_cmds=[self._read_str(f"open_cmd_{k}") for k in range(RTU_CMD_SIZE)],
            close_cmds=[self._read_str(f"close_cmd_{k}") for k in range(RTU_CMD_SIZE)],
            rtu_cmd_en=[self._read_flag(f"rtu_en_{k}") for k in range(RTU_CMD_SIZE)],
            snmp_en=[self._read_flag(f"snmp_en_{k}") for k in range(SNMP_SIZE)],
            oids=[self._read_str(f"snmp_oid_{k}") for k in range(SNMP_SIZE)],
        )
        self.item = item
        return item

    def save(self) -> None:
        """Write the current configuration to the settings file."""
        item = self.item
        self._write("ip_addr", item.ip)
        self._write("com_name", item.com)
        for index, (open_cmd, close_cmd) in enumerate(zip(item.open_cmds, item.close_cmds)):
            self._write(f"open_cmd_{index}", open_cmd)
            self._write(f"close_cmd_{index}", close_cmd)
        self._write("push_time", item.delay)
        for index, enabled in enumerate(item.rtu_cmd_en):
            self._write(f"rtu_en_{index}", enabled)
        for index, (enabled, oid) in enumerate(zip(item.snmp_en, item.oids)):
            self._write(f"snmp_en_{index}", enabled)
            self._write(f"snmp_oid_{index}", oid)