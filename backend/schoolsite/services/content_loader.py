"""Seed site content sections from YAML files."""
import logging
from pathlib import Path

import yaml
from sqlalchemy.orm import Session

from schoolsite.config import get_settings
from schoolsite.models.content import SiteContent

logger = logging.getLogger(__name__)
settings = get_settings()

SECTION_FIELDS = ("title", "subtitle", "description", "image_url", "extra_data")


def load_site_content(db: Session, configs_dir: Path | None = None) -> list[SiteContent]:
    """Insert default sections that are not in the database yet.

    Existing sections are left alone so that admin edits survive restarts.
    Returns the newly created rows.
    """
    configs_dir = configs_dir or settings.content_configs_dir
    if not configs_dir.exists():
        logger.warning(f"Site content directory not found: {configs_dir}")
        return []

    created = []

    for yaml_file in sorted(configs_dir.glob("*.yaml")):
        try:
            section = _load_single_section(db, yaml_file)
            if section:
                created.append(section)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load site content from {yaml_file}: {e}")

    db.commit()
    logger.info(f"Seeded {len(created)} site content sections")
    return created


def _load_single_section(db: Session, yaml_path: Path) -> SiteContent | None:
    with open(yaml_path, "r") as f:
        data = yaml.safe_load(f) or {}

    section_key = data.get("section_key")
    if not section_key:
        logger.warning(f"Site content file missing section_key: {yaml_path}")
        return None

    if db.query(SiteContent).filter(SiteContent.section_key == section_key).first():
        logger.debug(f"Site content already present: {section_key}")
        return None

    section = SiteContent(
        section_key=section_key,
        **{field: data.get(field) for field in SECTION_FIELDS},
    )
    db.add(section)
    db.flush()
    logger.debug(f"Created site content: {section_key}")
    return section
