"""Configuration management for Menustage.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

CONFIG_FILENAME = "menustage.toml"

DEFAULT_MAX_DEPTH = 2
DEFAULT_ADDMENU_SELECTOR = ".wpmenu-accordion .btn-addmenu"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class EditorConfig:
    """Menu editor configuration."""

    always_show_url: bool = False
    inline_addmenu: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH
    confirm_remove: bool = True
    focus_after_add: bool = True
    btn_addmenu_selector: str = DEFAULT_ADDMENU_SELECTOR
    menu_file: Path | None = None


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    editor: EditorConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for menustage.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        """Create config with all defaults."""
        return cls(server=ServerConfig(), editor=EditorConfig())

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary")

        server = cls._parse_server(data.get("server"))
        editor = cls._parse_editor(data.get("editor"), path.parent)

        return cls(server=server, editor=editor, config_path=path)

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section.

        Args:
            data: Raw server section data

        Returns:
            ServerConfig instance
        """
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_editor(cls, data: object, config_dir: Path) -> EditorConfig:
        """Parse editor configuration section.

        Args:
            data: Raw editor section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            EditorConfig instance
        """
        if data is None:
            return EditorConfig()

        if not isinstance(data, dict):
            raise ValueError("editor section must be a dictionary")

        flags: dict[str, bool] = {}
        for name, default in (
            ("always_show_url", False),
            ("inline_addmenu", True),
            ("confirm_remove", True),
            ("focus_after_add", True),
        ):
            value = data.get(name, default)
            if not isinstance(value, bool):
                raise ValueError(f"editor.{name} must be a boolean")
            flags[name] = value

        max_depth = data.get("max_depth", DEFAULT_MAX_DEPTH)
        if not isinstance(max_depth, int) or isinstance(max_depth, bool):
            raise ValueError("editor.max_depth must be an integer")
        if max_depth < 0:
            raise ValueError("editor.max_depth must not be negative")

        selector = data.get("btn_addmenu_selector", DEFAULT_ADDMENU_SELECTOR)
        if not isinstance(selector, str):
            raise ValueError("editor.btn_addmenu_selector must be a string")

        menu_file_raw = data.get("menu_file")
        menu_file: Path | None = None
        if menu_file_raw is not None:
            if not isinstance(menu_file_raw, str):
                raise ValueError("editor.menu_file must be a string")
            menu_file = config_dir / menu_file_raw

        return EditorConfig(
            max_depth=max_depth,
            btn_addmenu_selector=selector,
            menu_file=menu_file,
            **flags,
        )

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        max_depth: int | None = None,
        menu_file: Path | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            max_depth: Override editor.max_depth
            menu_file: Override editor.menu_file

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        editor = self.editor
        if max_depth is not None:
            editor = replace(editor, max_depth=max_depth)
        if menu_file is not None:
            editor = replace(editor, menu_file=menu_file)

        return replace(self, server=server, editor=editor)
