"""
Configuration Management for ReelCart

🔧 Unified Configuration System:
Dataclass-based configuration with per-environment presets, dictionary/JSON
loading and ``REELCART_*`` environment overrides. The process-wide config is
read through ``get_config()`` so entities pick up test overrides.
"""

from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from pathlib import Path
import json
import os


class Environment(Enum):
    """Application environments"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


@dataclass
class FeedConfig:
    """Video feed configuration"""
    initial_batch: int = 5
    batch_size: int = 5
    max_videos: int = 20
    prefetch_threshold: int = 3
    load_delay: float = 2.0
    seed: Optional[int] = None


@dataclass
class CartConfig:
    """Cart pricing configuration"""
    tax_rate: float = 0.08
    currency: str = "$"


@dataclass
class SessionConfig:
    """Session-scoped entity lifetime"""
    ttl: Optional[int] = 3600  # idle seconds before a session's entities expire; None keeps them
    sweep_interval: float = 300.0


@dataclass
class WebConfig:
    """Web server configuration"""
    host: str = "localhost"
    port: int = 5001
    debug: bool = False
    live: bool = False
    secret_key: Optional[str] = None


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """Complete application configuration"""
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    feed: FeedConfig = field(default_factory=FeedConfig)
    cart: CartConfig = field(default_factory=CartConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def for_environment(cls, environment: Environment) -> 'AppConfig':
        """Create configuration for specific environment"""
        config = cls(environment=environment)

        if environment == Environment.DEVELOPMENT:
            config.debug = True
            config.web.debug = True
            config.web.live = True
            config.logging.level = "DEBUG"

        elif environment == Environment.TESTING:
            config.feed.load_delay = 0
            config.feed.seed = 1234
            config.logging.level = "WARNING"

        elif environment == Environment.PRODUCTION:
            config.debug = False
            config.web.debug = False
            config.web.live = False
            config.web.host = "0.0.0.0"
            config.logging.level = "INFO"

        return config

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'AppConfig':
        """Create configuration from dictionary, starting from the environment preset"""
        environment = Environment(config_dict.get("environment", Environment.DEVELOPMENT.value))
        config = cls.for_environment(environment)

        if "debug" in config_dict:
            config.debug = bool(config_dict["debug"])

        for section in ("feed", "cart", "session", "web", "logging"):
            values = config_dict.get(section) or {}
            target = getattr(config, section)
            known = {f.name for f in fields(target)}
            for key, value in values.items():
                if key not in known:
                    raise ValueError(f"Unknown {section} setting: {key}")
                setattr(target, key, value)

        return config

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> 'AppConfig':
        """Load configuration from a JSON file"""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix != '.json':
            raise ValueError(f"Unsupported configuration file format: {config_path.suffix}")

        with open(config_path) as f:
            config_dict = json.load(f)

        return cls.from_dict(config_dict)

    @classmethod
    def from_environment(cls) -> 'AppConfig':
        """Create configuration from environment variables"""
        env_name = os.getenv('REELCART_ENV', 'development')
        config = cls.for_environment(Environment(env_name))

        if os.getenv('REELCART_DEBUG'):
            config.debug = os.getenv('REELCART_DEBUG').lower() == 'true'

        if os.getenv('REELCART_HOST'):
            config.web.host = os.getenv('REELCART_HOST')

        if os.getenv('REELCART_PORT'):
            config.web.port = int(os.getenv('REELCART_PORT'))

        if os.getenv('REELCART_SECRET_KEY'):
            config.web.secret_key = os.getenv('REELCART_SECRET_KEY')

        if os.getenv('REELCART_LOG_LEVEL'):
            config.logging.level = os.getenv('REELCART_LOG_LEVEL').upper()

        if os.getenv('REELCART_LOG_FILE'):
            config.logging.file_path = os.getenv('REELCART_LOG_FILE')

        if os.getenv('REELCART_TAX_RATE'):
            config.cart.tax_rate = float(os.getenv('REELCART_TAX_RATE'))

        if os.getenv('REELCART_LOAD_DELAY'):
            config.feed.load_delay = float(os.getenv('REELCART_LOAD_DELAY'))

        if os.getenv('REELCART_SEED'):
            config.feed.seed = int(os.getenv('REELCART_SEED'))

        if os.getenv('REELCART_SESSION_TTL'):
            config.session.ttl = int(os.getenv('REELCART_SESSION_TTL')) or None

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        def _convert(obj):
            if is_dataclass(obj):
                return {f.name: _convert(getattr(obj, f.name)) for f in fields(obj)}
            if isinstance(obj, Enum):
                return obj.value
            return obj
        return _convert(self)


_current_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Return the process-wide configuration, loading it from the environment on first use"""
    global _current_config
    if _current_config is None:
        _current_config = AppConfig.from_environment()
    return _current_config


def set_config(config: Optional[AppConfig]) -> None:
    """Replace the process-wide configuration (``None`` reloads from the environment)"""
    global _current_config
    _current_config = config
