#!/usr/bin/env python3

import os
import yaml
import logging
from typing import Any, Dict, List, Optional
from dotenv import find_dotenv, load_dotenv
from rich.console import Console

from tkosubs.base_provider import Credentials
from tkosubs.constants import (
    CONNECT_TIMEOUT, DEFAULT_USER_AGENT, ENV_KEYS, REQUEST_TIMEOUT, SCAN_TIMEOUT,
    TLS_HANDSHAKE_TIMEOUT, VERSION
)

class ConfigManager:
    """Configuration manager for tko-subs"""

    def __init__(self, config_file: str = "config.yaml", env_file: Optional[str] = None):
        self.console = Console(stderr=True)
        self.logger = logging.getLogger(__name__)
        self.config_file = config_file
        self.env_file = env_file
        self.config: Dict[str, Any] = {}
        self.load_config()
        self.load_env()

    def load_config(self) -> None:
        """Load configuration from file"""
        try:
            # Look for config file in common locations
            config_paths = [
                self.config_file,
                os.path.expanduser("~/.tko-subs/config.yaml"),
                "/etc/tko-subs/config.yaml"
            ]

            config_file = None
            for path in config_paths:
                if path and os.path.exists(path):
                    config_file = path
                    break

            if not config_file:
                self.logger.debug("No configuration file found, using defaults")
                self.config = self._get_default_config()
                return

            with open(config_file, 'r') as f:
                self.config = yaml.safe_load(f) or {}

            self.logger.info(f"Loaded configuration from {config_file}")

            self._validate_config()

        except (OSError, yaml.YAMLError) as e:
            self.logger.error(f"Error loading configuration: {str(e)}")
            self.console.print(f"[red]Error loading configuration: {str(e)}")
            self.config = self._get_default_config()

    def load_env(self) -> None:
        """Populate the process environment from a .env file, keeping existing values"""
        if self.env_file:
            if not load_dotenv(self.env_file):
                self.logger.warning(f"No variables loaded from {self.env_file}")
        else:
            load_dotenv(find_dotenv(usecwd=True))

    def _get_default_config(self) -> Dict[str, Any]:
        """Return default configuration"""
        return {
            "version": VERSION,
            "scan": {
                "timeout": SCAN_TIMEOUT
            },
            "http": {
                "connect_timeout": CONNECT_TIMEOUT,
                "tls_handshake_timeout": TLS_HANDSHAKE_TIMEOUT,
                "request_timeout": REQUEST_TIMEOUT,
                "user_agent": DEFAULT_USER_AGENT
            },
            "dns": {
                "nameservers": [],
                "query_timeout": SCAN_TIMEOUT
            },
            "logging": {
                "level": "INFO"
            },
            "api_keys": {}
        }

    def _validate_config(self) -> None:
        """Validate configuration values, falling back to defaults"""
        if not isinstance(self.config, dict):
            self.logger.warning("Configuration is not a mapping, using defaults")
            self.config = self._get_default_config()
            return

        defaults = self._get_default_config()
        for section, values in defaults.items():
            if not isinstance(values, dict):
                self.config.setdefault(section, values)
                continue
            if not isinstance(self.config.get(section), dict):
                if section in self.config:
                    self.logger.warning(f"Invalid {section} section in config")
                self.config[section] = {}
            for key, value in values.items():
                self.config[section].setdefault(key, value)

        for section, key in [("scan", "timeout"), ("http", "connect_timeout"),
                             ("http", "tls_handshake_timeout"), ("http", "request_timeout"),
                             ("dns", "query_timeout")]:
            default = defaults[section][key]
            try:
                value = float(self.config[section][key])
                if value <= 0:
                    raise ValueError(value)
                self.config[section][key] = value
            except (TypeError, ValueError):
                self.logger.warning(f"Invalid {section}.{key} in config, using {default}")
                self.config[section][key] = default

        if not isinstance(self.config["dns"]["nameservers"], list):
            self.logger.warning("dns.nameservers must be a list, ignoring")
            self.config["dns"]["nameservers"] = []

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a configuration value"""
        try:
            return self.config[section][key]
        except (KeyError, TypeError):
            return default

    @property
    def nameservers(self) -> List[str]:
        return [str(ns) for ns in self.get("dns", "nameservers", []) or []]

    def get_api_key(self, service: str) -> Optional[str]:
        """Get a secret, preferring the environment over the config file"""
        for env_key in ENV_KEYS.get(service, []):
            value = os.environ.get(env_key)
            if value:
                return value
        try:
            return self.config["api_keys"].get(service) or None
        except (KeyError, AttributeError):
            return None

    def get_credentials(self) -> Credentials:
        """Collect takeover secrets into an explicit structure"""
        return Credentials(**{service: self.get_api_key(service) for service in ENV_KEYS})
