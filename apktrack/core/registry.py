"""
Source Registry - Loads the update cascade and settings.
"""

import logging
import os
from typing import Dict, Any, List, Optional

import yaml

from apktrack.models.source import SourceSpec

logger = logging.getLogger('SourceRegistry')


class SourceRegistry:
    """Registry that holds the ordered source cascade and application settings."""

    def __init__(self, config_path: str = None, settings_path: str = None):
        """
        Initialize the registry with configuration files.

        Args:
            config_path: Path to sources.yaml
            settings_path: Path to settings.yaml

        Raises:
            ValueError: if a source entry is invalid
        """
        self.base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

        if config_path is None:
            config_path = os.path.join(self.base_dir, 'config', 'sources.yaml')
        if settings_path is None:
            settings_path = os.path.join(self.base_dir, 'config', 'settings.yaml')

        self.settings = self._load_config(settings_path)
        self.sources = self._build_sources(self._load_config(config_path))

    def _load_config(self, path: str) -> Dict[str, Any]:
        """Load YAML configuration file."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning(f"Config file not found: {path}")
            return {}
        except yaml.YAMLError as e:
            logger.warning(f"Error parsing YAML file {path}: {e}")
            return {}

    def _build_sources(self, config: Dict[str, Any]) -> List[SourceSpec]:
        """Compile the cascade entries in declaration order."""
        sources = []
        seen = set()
        for entry in config.get('cascade') or []:
            source = SourceSpec.from_dict(entry)
            if source.id in seen:
                raise ValueError(f"Duplicate source id: {source.id}")
            seen.add(source.id)
            sources.append(source)
        return sources

    def get_source(self, source_id: str) -> Optional[SourceSpec]:
        """
        Get a source by id.

        Args:
            source_id: Identifier declared in sources.yaml

        Returns:
            SourceSpec or None
        """
        return next((s for s in self.sources if s.id == source_id), None)

    def get_cascade(self) -> List[SourceSpec]:
        """Get the sources in the order they are tried."""
        return list(self.sources)

    def list_sources(self) -> List[str]:
        """List source ids in cascade order."""
        return [s.id for s in self.sources]

    def get_settings(self) -> Dict[str, Any]:
        """Get application settings."""
        return self.settings
