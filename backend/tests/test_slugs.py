from sqlmodel import Session

from kendo.models.tournament import Tournament
from kendo.utils.slugs import DEFAULT_SLUG, slugify, unique_slug


def test_slugify_basic():
    assert slugify("Campeonato Nacional 2026!") == "campeonato-nacional-2026"


def test_slugify_folds_accents_and_collapses_separators():
    assert slugify("  Copa  México -- Ñuñoa  ") == "copa-mexico-nunoa"


def test_slugify_empty_falls_back():
    assert slugify("") == DEFAULT_SLUG
    assert slugify("!!!") == DEFAULT_SLUG


def test_unique_slug_suffixes_taken_slugs(session: Session):
    session.add(Tournament(name="Open Cup", slug="open-cup"))
    session.add(Tournament(name="Open Cup", slug="open-cup-2"))
    session.commit()

    assert unique_slug(session, "Open Cup") == "open-cup-3"
    assert unique_slug(session, "Other Cup") == "other-cup"


def test_unique_slug_ignores_own_row(session: Session):
    tournament = Tournament(name="Open Cup", slug="open-cup")
    session.add(tournament)
    session.commit()
    session.refresh(tournament)

    assert unique_slug(session, "Open Cup", exclude_id=tournament.id) == "open-cup"


def test_trashed_tournaments_keep_their_slug(session: Session):
    tournament = Tournament(name="Open Cup", slug="open-cup")
    tournament.mark_deleted()
    session.add(tournament)
    session.commit()

    assert unique_slug(session, "Open Cup") == "open-cup-2"
