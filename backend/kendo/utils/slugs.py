"""
Slugs for URL lookups of tournaments.

A slug is generated once, from the name, when the tournament is created.
Renaming a tournament does not touch it; regenerate explicitly if needed.
"""
import logging
import re
import unicodedata
from typing import Optional

from sqlmodel import Session, select

from kendo.models.tournament import Tournament

logger = logging.getLogger(__name__)

DEFAULT_SLUG = "tournament"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """
    "Campeonato Nacional 2026!" -> "campeonato-nacional-2026"
    Accents are folded to ASCII; an empty result falls back to DEFAULT_SLUG.
    """
    ascii_text = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    slug = _NON_ALNUM.sub("-", ascii_text.lower()).strip("-")
    return slug or DEFAULT_SLUG


def slug_taken(session: Session, slug: str, exclude_id: Optional[int] = None) -> bool:
    # Trashed tournaments keep their slug reserved
    query = select(Tournament.id).where(Tournament.slug == slug)
    if exclude_id is not None:
        query = query.where(Tournament.id != exclude_id)
    return session.exec(query).first() is not None


def unique_slug(session: Session, name: str, exclude_id: Optional[int] = None) -> str:
    """slugify(name), suffixed with -2, -3, ... until no other tournament uses it"""
    base = slugify(name)
    candidate = base
    suffix = 2
    while slug_taken(session, candidate, exclude_id):
        candidate = f"{base}-{suffix}"
        suffix += 1
    if candidate != base:
        logger.debug("Slug %s taken, using %s", base, candidate)
    return candidate
