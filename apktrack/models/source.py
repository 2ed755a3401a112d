"""
Source Spec model.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Dict


@dataclass(frozen=True)
class SourceSpec:
    """One step of the update cascade: where to look and what to match."""

    id: str
    url_template: str
    version_pattern: re.Pattern
    name: str = ""
    unavailable_pattern: Optional[re.Pattern] = None
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> 'SourceSpec':
        """
        Create SourceSpec from configuration dictionary.

        Patterns are compiled once here and shared by every check.

        Raises:
            ValueError: if the entry is incomplete or a pattern is invalid
        """
        source_id = data.get('id')
        url_template = data.get('url_template', '')
        version_pattern = data.get('version_pattern')

        if not source_id:
            raise ValueError("Source entry without an id")
        if url_template.count('%s') != 1:
            raise ValueError(f"Source '{source_id}': url_template needs exactly one %s slot")
        if not version_pattern:
            raise ValueError(f"Source '{source_id}': version_pattern is required")

        unavailable = data.get('unavailable_pattern')
        try:
            compiled = re.compile(version_pattern)
            compiled_unavailable = re.compile(unavailable) if unavailable else None
        except re.error as e:
            raise ValueError(f"Source '{source_id}': invalid pattern: {e}") from e

        # The version is read from the first capture group.
        if compiled.groups < 1:
            raise ValueError(f"Source '{source_id}': version_pattern needs a capture group")

        return cls(
            id=source_id,
            name=data.get('name', source_id),
            url_template=url_template,
            version_pattern=compiled,
            unavailable_pattern=compiled_unavailable,
            headers=dict(data.get('headers') or {}),
        )

    def build_url(self, package_name: str) -> str:
        return self.url_template % package_name

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'url_template': self.url_template,
            'version_pattern': self.version_pattern.pattern,
            'unavailable_pattern': self.unavailable_pattern.pattern if self.unavailable_pattern else None,
            'headers': dict(self.headers),
        }
