"""Settings configuration loader module.

This module handles loading and parsing of the settings.conf file which
contains general application settings.

The settings file uses INI format with a [DEFAULT] section containing
key-value pairs. Every setting is optional; a missing file yields the
defaults.

Example settings.conf:
    [DEFAULT]
    log_level = DEBUG
    seed_demo_data = true

Raises:
    SettingsError: If the settings file is invalid or holds invalid values
"""
from configparser import ConfigParser
from pathlib import Path
from typing import Dict, Any, List
import logging

logger = logging.getLogger(__name__)

class ConfigValidationError:
    """Helper class to format configuration validation errors"""
    def __init__(self):
        self.invalid: List[str] = []
        self.unexpected_sections: List[str] = []

    def has_errors(self) -> bool:
        """Check if any errors exist"""
        return bool(self.invalid or self.unexpected_sections)

    def format_message(self) -> str:
        """Format error message in a clean, readable way"""
        messages = []

        if self.unexpected_sections:
            messages.append("Unexpected sections (only [DEFAULT] is read):")
            messages.extend(f"  - {item}" for item in self.unexpected_sections)

        if self.invalid:
            if messages:
                messages.append("")
            messages.append("Invalid settings:")
            messages.extend(f"  - {item}" for item in self.invalid)

        return "\n".join(messages)

class SettingsError(Exception):
    """Raised when there are issues loading or parsing the settings configuration."""
    pass

# Default settings
DEFAULTS = {
    'log_level': 'INFO',
    'seed_demo_data': 'false',  # Populate the store with demo rows on startup
}

LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}

def load_settings_conf(settings_path: str = ".") -> Dict[str, Any]:
    """Load and parse settings.conf file with strict validation

    Args:
        settings_path: Directory containing settings.conf

    Returns:
        Dictionary containing validated settings

    Raises:
        SettingsError: If parsing fails or validation fails
    """
    config_path = Path(settings_path) / 'settings.conf'

    if not config_path.exists():
        logger.debug(f"No settings file at {config_path}, using defaults")
        return validate_settings(dict(DEFAULTS))

    try:
        parser = ConfigParser(defaults=DEFAULTS)
        parser.read(config_path)

        errors = ConfigValidationError()

        # Settings live in the DEFAULT section only
        if parser.sections():
            errors.unexpected_sections.extend(f"[{name}]" for name in parser.sections())
            raise SettingsError(
                "Settings Configuration Validation Failed\n\n" +
                errors.format_message()
            )

        return validate_settings(dict(parser['DEFAULT']))

    except Exception as e:
        if isinstance(e, SettingsError):
            raise
        raise SettingsError(f"Error parsing settings.conf: {str(e)}")

def validate_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Validate loaded settings.

    Args:
        settings: Dictionary of settings to validate

    Returns:
        Validated and processed settings

    Raises:
        SettingsError: If validation fails
    """
    errors = ConfigValidationError()

    level = str(settings.get('log_level', DEFAULTS['log_level'])).strip().upper()
    if level not in LOG_LEVELS:
        errors.invalid.append(f"log_level: {settings.get('log_level')} (expected one of {', '.join(sorted(LOG_LEVELS))})")
    settings['log_level'] = level

    seed = str(settings.get('seed_demo_data', DEFAULTS['seed_demo_data'])).strip().lower()
    if seed not in ConfigParser.BOOLEAN_STATES:
        errors.invalid.append(f"seed_demo_data: {settings.get('seed_demo_data')} (expected a boolean)")
    else:
        settings['seed_demo_data'] = ConfigParser.BOOLEAN_STATES[seed]

    if errors.has_errors():
        raise SettingsError(
            "Settings Configuration Validation Failed\n\n" +
            errors.format_message()
        )
    return settings
