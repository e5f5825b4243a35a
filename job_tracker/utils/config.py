"""
Configuration management for Job Tracker.

Config reads the JSON config file (with environment overrides for API keys).
Components never read it directly: Config.pipeline_settings() builds the
explicit settings structs that are passed to each component's constructor.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import copy
import json
import os


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class ScorerSettings:
    """Settings for the AI match scorer."""
    api_key: str = ""
    model: str = "claude-sonnet-4-20250514"
    temperature: float = 0.3
    max_tokens: int = 10
    max_input_chars: int = 8000
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class FetcherSettings:
    """Settings for the job-description fetcher."""
    timeout_seconds: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    min_content_length: int = 50
    broaden_below_length: int = 100


@dataclass(frozen=True)
class StorageSettings:
    """Settings for resume file storage."""
    root_dir: str = "./job_tracker_data/storage"
    bucket: str = "resumes"


@dataclass(frozen=True)
class PipelineSettings:
    """Everything the match-score pipeline and its collaborators need."""
    scorer: ScorerSettings = field(default_factory=ScorerSettings)
    fetcher: FetcherSettings = field(default_factory=FetcherSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)
    min_resume_length: int = 50
    max_workers: int = 4


class Config:
    """Manages application configuration and API keys."""

    DEFAULT_CONFIG = {
        "api_keys": {
            "anthropic": "",
        },
        "scoring": {
            "model": "claude-sonnet-4-20250514",
            "temperature": 0.3,
            "max_tokens": 10,
            "max_input_chars": 8000,
            "timeout_seconds": 30,
            "min_resume_length": 50,
        },
        "scraping": {
            "timeout_seconds": 10,
            "user_agent": DEFAULT_USER_AGENT,
            "min_content_length": 50,
            "broaden_below_length": 100,
        },
        "storage": {
            "resume_dir": "./job_tracker_data/storage",
            "bucket": "resumes",
        },
        "tracker": {
            "data_dir": "./job_tracker_data/jobs",
            "max_workers": 4,
        },
    }

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file (default: ~/.job_tracker/config.json)
        """
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / ".job_tracker" / "config.json"

        self.config = self._load_config()

    def _load_config(self) -> dict:
        """Load configuration from file or create default."""
        defaults = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path.exists():
            with open(self.config_path, 'r') as f:
                user_config = json.load(f)

            # Merge with defaults
            return self._deep_merge(defaults, user_config)

        return defaults

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def save(self) -> None:
        """Save current configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, 'w') as f:
            json.dump(self.config, f, indent=2)

    def get(self, key: str, default=None):
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "scoring.model")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value) -> None:
        """
        Set a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "scraping.timeout_seconds")
            value: Value to set
        """
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def get_api_key(self, provider: str) -> str:
        """
        Get API key for a provider.

        Environment variables (e.g. ANTHROPIC_API_KEY) take precedence
        over the config file.
        """
        env_var = f"{provider.upper()}_API_KEY"
        env_value = os.environ.get(env_var)

        if env_value:
            return env_value

        return self.get(f"api_keys.{provider}", "")

    def set_api_key(self, provider: str, key: str) -> None:
        """Set API key for a provider."""
        self.set(f"api_keys.{provider}", key)
        self.save()

    def get_data_dir(self) -> str:
        """Get the job record directory."""
        return self.get("tracker.data_dir", "./job_tracker_data/jobs")

    def pipeline_settings(self) -> PipelineSettings:
        """Build the settings structs injected into pipeline components."""
        return PipelineSettings(
            scorer=ScorerSettings(
                api_key=self.get_api_key("anthropic"),
                model=self.get("scoring.model"),
                temperature=float(self.get("scoring.temperature")),
                max_tokens=int(self.get("scoring.max_tokens")),
                max_input_chars=int(self.get("scoring.max_input_chars")),
                timeout_seconds=float(self.get("scoring.timeout_seconds")),
            ),
            fetcher=FetcherSettings(
                timeout_seconds=float(self.get("scraping.timeout_seconds")),
                user_agent=self.get("scraping.user_agent"),
                min_content_length=int(self.get("scraping.min_content_length")),
                broaden_below_length=int(self.get("scraping.broaden_below_length")),
            ),
            storage=StorageSettings(
                root_dir=self.get("storage.resume_dir"),
                bucket=self.get("storage.bucket"),
            ),
            min_resume_length=int(self.get("scoring.min_resume_length")),
            max_workers=int(self.get("tracker.max_workers")),
        )

    def print_config(self) -> None:
        """Print current configuration (with API keys masked)."""
        masked_config = self._mask_sensitive(self.config)
        print(json.dumps(masked_config, indent=2))

    def _mask_sensitive(self, data: dict, sensitive_keys: set = None) -> dict:
        """Mask sensitive values in configuration."""
        if sensitive_keys is None:
            sensitive_keys = {"api_key", "api_keys", "key", "secret", "password", "token"}

        result = {}
        for key, value in data.items():
            if isinstance(value, dict):
                if any(s in key.lower() for s in sensitive_keys):
                    result[key] = {k: self._mask_value(v) for k, v in value.items()}
                else:
                    result[key] = self._mask_sensitive(value, sensitive_keys)
            elif any(s in key.lower() for s in sensitive_keys):
                result[key] = self._mask_value(value)
            else:
                result[key] = value
        return result

    @staticmethod
    def _mask_value(value) -> str:
        if not value:
            return "(not set)"
        value = str(value)
        return f"{value[:4]}...{value[-4:]}" if len(value) > 8 else "****"
