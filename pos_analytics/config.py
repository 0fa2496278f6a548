import os
import configparser
import urllib.parse
from pathlib import Path

from pos_analytics.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path('config') / 'settings.ini'

DEFAULTS = {
    'DATABASE': {
        'engine': 'postgresql',
        'host': 'localhost',
        'port': '5432',
        'database': 'pos',
        'username': 'postgres',
        'password': 'postgres',
        'echo': 'False',
        'pool_size': '10',
        'max_overflow': '20',
        'pool_timeout': '30',
        'pool_recycle': '1800'
    },
    'LOGGING': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'directory': 'logs',
        'max_size_mb': '10',
        'backup_count': '5',
        'console_output': 'True'
    },
    'ANALYTICS': {
        'active_days': '30',
        'at_risk_days': '90',
        'reorder_horizon_days': '30',
        'low_stock_alert_days': '7',
        'retention_months': '6',
        'affinity_limit': '10',
        'profit_margin_limit': '20',
        'top_customers_limit': '10'
    }
}


class Config:
    """Configuration manager for POS Analytics."""

    _instance = None

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the configuration if not already initialized."""
        if self._initialized:
            return

        self.load(os.environ.get('POS_ANALYTICS_CONFIG', DEFAULT_CONFIG_PATH))
        self._initialized = True

    def load(self, path):
        """Load configuration from an INI file, falling back to defaults.

        Args:
            path: Path of the settings file
        """
        self._config_path = Path(path)
        self._config = configparser.ConfigParser(interpolation=None)
        self._config.read_dict(DEFAULTS)

        if self._config_path.exists():
            try:
                self._config.read(self._config_path)
            except configparser.Error as e:
                raise ConfigError(
                    f"Invalid settings file {self._config_path}: {str(e)}",
                    code='INVALID_CONFIG', details={'path': str(self._config_path)}
                )

    def save(self):
        """Save configuration to file."""
        if not self._config_path.parent.exists():
            self._config_path.parent.mkdir(parents=True)

        with open(self._config_path, 'w') as configfile:
            self._config.write(configfile)

    def get(self, section, key, default=None):
        """Get configuration value."""
        try:
            return self._config.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default

    def get_int(self, section, key, default=None):
        """Get configuration value as integer."""
        try:
            return self._config.getint(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_float(self, section, key, default=None):
        """Get configuration value as float."""
        try:
            return self._config.getfloat(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_boolean(self, section, key, default=None):
        """Get configuration value as boolean."""
        try:
            return self._config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def set(self, section, key, value):
        """Set configuration value (in memory; call save() to persist)."""
        if not self._config.has_section(section):
            self._config.add_section(section)

        self._config.set(section, key, str(value))

    def get_db_url(self):
        """Generate SQLAlchemy database URL.

        An explicit DATABASE.url wins over the individual connection fields.
        """
        url = self.get('DATABASE', 'url')
        if url:
            return url

        engine = self.get('DATABASE', 'engine', 'postgresql')
        username = self.get('DATABASE', 'username', 'postgres')
        password = urllib.parse.quote_plus(self.get('DATABASE', 'password', 'postgres'))
        host = self.get('DATABASE', 'host', 'localhost')
        port = self.get('DATABASE', 'port', '5432')
        database = self.get('DATABASE', 'database', 'pos')

        return f"{engine}://{username}:{password}@{host}:{port}/{database}"

    @property
    def log_config(self):
        """Get logging configuration."""
        return {
            'level': self.get('LOGGING', 'level', 'INFO'),
            'format': self.get('LOGGING', 'format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            'directory': self.get('LOGGING', 'directory', 'logs'),
            'max_size_mb': self.get_int('LOGGING', 'max_size_mb', 10),
            'backup_count': self.get_int('LOGGING', 'backup_count', 5),
            'console_output': self.get_boolean('LOGGING', 'console_output', True)
        }

    @property
    def analytics_config(self):
        """Get analytics thresholds and report limits."""
        return {
            'active_days': self.get_int('ANALYTICS', 'active_days', 30),
            'at_risk_days': self.get_int('ANALYTICS', 'at_risk_days', 90),
            'reorder_horizon_days': self.get_int('ANALYTICS', 'reorder_horizon_days', 30),
            'low_stock_alert_days': self.get_int('ANALYTICS', 'low_stock_alert_days', 7),
            'retention_months': self.get_int('ANALYTICS', 'retention_months', 6),
            'affinity_limit': self.get_int('ANALYTICS', 'affinity_limit', 10),
            'profit_margin_limit': self.get_int('ANALYTICS', 'profit_margin_limit', 20),
            'top_customers_limit': self.get_int('ANALYTICS', 'top_customers_limit', 10)
        }

# Global config instance
config = Config()
