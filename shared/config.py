"""
Configuration management for the file share upload function
"""
import os
import json
from typing import Mapping, Optional


class Config:
    """Configuration snapshot for Azure Files uploads"""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        if values is None:
            self._load_local_settings()
            values = os.environ
        self._values = dict(values)
        self.environment = self._values.get('ENVIRONMENT', 'development')

    def _load_local_settings(self):
        """Load local.settings.json for local development"""
        settings_file = 'local.settings.json'
        paths_to_try = [
            settings_file,
            os.path.join(os.path.dirname(__file__), '..', settings_file),
            os.path.join(os.getcwd(), settings_file)
        ]

        for path in paths_to_try:
            if os.path.exists(path):
                try:
                    with open(path, 'r') as f:
                        settings = json.load(f)
                except (OSError, ValueError):
                    continue
                values = settings.get('Values', {})
                for key, value in values.items():
                    if key not in os.environ:
                        os.environ[key] = str(value)
                return

    def _get_required_config(self, key: str, default: Optional[str] = None) -> str:
        value = self._values.get(key) or default
        if value is None:
            raise ValueError(f"Required configuration '{key}' is not set")
        return str(value)

    @property
    def storage_connection_string(self) -> str:
        return self._get_required_config('AzureWebJobsStorage')

    @property
    def file_share_name(self) -> str:
        return self._get_required_config('FILE_SHARE_NAME', 'contractsshare')

    @property
    def upload_directory(self) -> str:
        return self._get_required_config('FILE_SHARE_UPLOAD_DIRECTORY', 'uploads')


config = Config()
