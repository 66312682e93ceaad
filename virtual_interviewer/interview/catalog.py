"""
Job catalog: role key -> JobTemplate lookup.
"""
import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from .models import JobTemplate
from .schemas import parse_job_templates
from ..config import DEFAULT_JOB_TEMPLATES

logger = logging.getLogger("job_catalog")


class JobConfigurationError(ValueError):
    """Raised for an unknown job key or a malformed job configuration."""


class JobCatalog:
    """Read-only mapping from role key to JobTemplate."""

    def __init__(self, templates: Mapping[str, JobTemplate]):
        self._templates: Dict[str, JobTemplate] = dict(templates)

    @classmethod
    def from_mapping(cls, raw: Any) -> "JobCatalog":
        """Build a catalog from a raw {key: {title, skills, questions}} mapping."""
        try:
            return cls(parse_job_templates(raw))
        except ValueError as e:
            raise JobConfigurationError(str(e))

    @classmethod
    def from_json_file(cls, path: str) -> "JobCatalog":
        """Load and validate a job configuration JSON file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise JobConfigurationError(f"Could not read job configuration {path}: {e}")
        catalog = cls.from_mapping(raw)
        logger.info(f"Loaded {len(catalog)} job templates from {path}")
        return catalog

    @classmethod
    def default(cls, jobs_file: Optional[str] = None) -> "JobCatalog":
        """Built-in catalog, or the given JSON file when one is configured."""
        if jobs_file:
            return cls.from_json_file(jobs_file)
        return cls.from_mapping(DEFAULT_JOB_TEMPLATES)

    def get(self, job_key: str) -> JobTemplate:
        """
        Look up a template.

        Raises:
            JobConfigurationError: If the key is not in the catalog
        """
        try:
            return self._templates[job_key]
        except (KeyError, TypeError):
            known = ", ".join(self._templates) or "none"
            raise JobConfigurationError(f"Unknown job key {job_key!r} (known: {known})")

    def keys(self) -> List[str]:
        return list(self._templates)

    def __contains__(self, job_key: object) -> bool:
        return job_key in self._templates

    def __len__(self) -> int:
        return len(self._templates)
