"""
Slug allocation for campaign landing pages.
"""
import logging
import re
import secrets
from typing import Optional

from sqlalchemy.orm import Session

from ..config import get_settings
from ..models import Campaign

logger = logging.getLogger(__name__)

FALLBACK_SLUG = "campaign"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: Optional[str]) -> str:
    """Lowercase, collapse non-alphanumeric runs to '-', trim the edges."""
    if not text:
        return ""
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


class SlugAllocator:
    """
    Hands out page slugs that no existing campaign holds.

    Probing and inserting are separate steps, so two concurrent creations can
    observe the same free slug. The unique index on campaigns.page_slug rejects
    the second insert and campaign creation allocates again.
    """

    def __init__(self, max_attempts: Optional[int] = None):
        self.max_attempts = max_attempts or get_settings().slug_max_attempts

    def is_taken(self, db: Session, slug: str) -> bool:
        return db.query(Campaign.id).filter(Campaign.page_slug == slug).first() is not None

    def allocate(self, db: Session, candidate_text: Optional[str]) -> str:
        """
        Allocate a free slug derived from candidate_text.

        Tries the base slug, then base-1, base-2, ... up to max_attempts probes.
        Past the cap a random hex suffix is used so the call always returns.
        """
        base = slugify(candidate_text) or FALLBACK_SLUG
        slug = base

        for counter in range(1, self.max_attempts + 1):
            if not self.is_taken(db, slug):
                return slug
            slug = f"{base}-{counter}"

        slug = f"{base}-{secrets.token_hex(3)}"
        while self.is_taken(db, slug):
            slug = f"{base}-{secrets.token_hex(3)}"
        logger.warning(f"Slug probe cap reached for '{base}', using random suffix {slug}")
        return slug


def get_slug_allocator() -> SlugAllocator:
    return SlugAllocator()
