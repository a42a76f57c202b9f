"""
Tournament service: lifecycle, relationship loaders and rule presets.

Relationships that go through Championship (categories, settings, teams,
competitors, trees) and the polymorphic invites are loaded with explicit
functions here instead of lazy attributes on the model.

Lifecycle cascades:
- delete: championships are soft-deleted, invites are hard-deleted
- restore: every championship of the tournament is restored, including the
  ones trashed before the tournament itself was deleted
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy.orm import selectinload
from sqlmodel import Session, func, select

from kendo.models.category import Category
from kendo.models.championship import Championship
from kendo.models.championship_settings import ChampionshipSettings
from kendo.models.competitor import Competitor
from kendo.models.invite import InvitableKind, Invite
from kendo.models.soft_delete import active, only_trashed, utc_now
from kendo.models.team import Team
from kendo.models.tournament import Tournament
from kendo.models.tree import Tree
from kendo.rule_presets import (
    RulePresetProvider,
    default_provider,
    load_rules_options,
    settings_for_championship,
)
from kendo.services.audit import (
    AUDIT_CREATED,
    AUDIT_DELETED,
    AUDIT_RESTORED,
    AUDIT_UPDATED,
    record_audit,
    snapshot,
)
from kendo.services.championship_service import (
    delete_championship,
    purge_championship,
    restore_championship,
)
from kendo.utils.slugs import unique_slug

logger = logging.getLogger(__name__)

# Attributes settable through create/update
FILLABLE_FIELDS = (
    "name",
    "date_ini",
    "date_fin",
    "register_date_limit",
    "sport",
    "promoter",
    "host_organization",
    "technical_assistance",
    "category",
    "rule_id",
    "type",
    "venue_id",
    "level_id",
)


class TournamentNotFoundError(LookupError):
    """No tournament for the given slug"""

    pass


class TournamentStateError(ValueError):
    """Lifecycle operation not allowed in the tournament's current state"""

    pass


def _fillable(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if key in FILLABLE_FIELDS}


# ============================================================================
# Lookup
# ============================================================================


def get_tournament_by_slug(session: Session, slug: str, with_trashed: bool = False) -> Tournament:
    query = select(Tournament).where(Tournament.slug == slug)
    if not with_trashed:
        query = active(query, Tournament)
    tournament = session.exec(query).first()
    if tournament is None:
        raise TournamentNotFoundError(f"Tournament {slug} not found")
    return tournament


def list_tournaments(session: Session, with_trashed: bool = False, trashed_only: bool = False) -> List[Tournament]:
    query = select(Tournament).order_by(Tournament.id)
    if trashed_only:
        query = only_trashed(query, Tournament)
    elif not with_trashed:
        query = active(query, Tournament)
    return list(session.exec(query).all())


# ============================================================================
# Create / update
# ============================================================================


def create_tournament(
    session: Session,
    data: Mapping[str, Any],
    owner_id: Optional[int] = None,
    commit: bool = True,
) -> Tournament:
    """
    Insert a tournament with a freshly generated slug.

    With commit=False the row is only flushed, so the caller can apply a
    rule preset in the same transaction and commit once.
    """
    values = _fillable(data)
    tournament = Tournament(**values, slug=unique_slug(session, values.get("name", "")), user_id=owner_id)
    session.add(tournament)
    session.flush()

    record_audit(session, tournament, AUDIT_CREATED, new_values=snapshot(tournament))
    if commit:
        session.commit()
        session.refresh(tournament)
    logger.info("Created tournament %s (%s)", tournament.id, tournament.slug)
    return tournament


def update_tournament(session: Session, tournament: Tournament, changes: Mapping[str, Any]) -> Tournament:
    """Apply fillable changes; the slug is left alone. Commits"""
    old_values: Dict[str, Any] = {}
    new_values: Dict[str, Any] = {}
    before = snapshot(tournament)

    for field, value in _fillable(changes).items():
        setattr(tournament, field, value)

    after = snapshot(tournament)
    for field in FILLABLE_FIELDS:
        if before.get(field) != after.get(field):
            old_values[field] = before.get(field)
            new_values[field] = after.get(field)

    tournament.updated_at = utc_now()
    session.add(tournament)
    if new_values:
        record_audit(session, tournament, AUDIT_UPDATED, old_values=old_values, new_values=new_values)
    session.commit()
    session.refresh(tournament)
    return tournament


def regenerate_slug(session: Session, tournament: Tournament) -> str:
    """Re-derive the slug from the current name; commits"""
    old_slug = tournament.slug
    tournament.slug = unique_slug(session, tournament.name, exclude_id=tournament.id)
    if tournament.slug != old_slug:
        session.add(tournament)
        record_audit(session, tournament, AUDIT_UPDATED, old_values={"slug": old_slug}, new_values={"slug": tournament.slug})
        session.commit()
        session.refresh(tournament)
    return tournament.slug


# ============================================================================
# Delete / restore
# ============================================================================


def delete_tournament(session: Session, tournament: Tournament) -> None:
    """
    Soft-delete the tournament.

    Championships are soft-deleted (with their settings and competitors);
    invites are removed outright. Commits.
    """
    if tournament.is_deleted():
        raise TournamentStateError(f"Tournament {tournament.slug} is already deleted")

    championships = load_championships(session, tournament)
    for championship in championships:
        delete_championship(session, championship)

    invites = load_invites(session, tournament)
    for invite in invites:
        session.delete(invite)

    tournament.mark_deleted()
    session.add(tournament)
    record_audit(
        session,
        tournament,
        AUDIT_DELETED,
        old_values={"deleted_at": None},
        new_values={"deleted_at": tournament.deleted_at.isoformat()},
    )
    session.commit()
    session.refresh(tournament)
    logger.info(
        "Deleted tournament %s: %d championships trashed, %d invites removed",
        tournament.slug,
        len(championships),
        len(invites),
    )


def restore_tournament(session: Session, tournament: Tournament) -> None:
    """Restore the tournament and every one of its championships. Commits"""
    if not tournament.is_deleted():
        raise TournamentStateError(f"Tournament {tournament.slug} is not deleted")

    championships = load_championships(session, tournament, with_trashed=True)
    for championship in championships:
        restore_championship(session, championship)

    deleted_at = tournament.deleted_at
    tournament.mark_restored()
    session.add(tournament)
    record_audit(
        session,
        tournament,
        AUDIT_RESTORED,
        old_values={"deleted_at": deleted_at.isoformat()},
        new_values={"deleted_at": None},
    )
    session.commit()
    session.refresh(tournament)
    logger.info("Restored tournament %s with %d championships", tournament.slug, len(championships))


# ============================================================================
# Relationship loaders
# ============================================================================


def load_championships(session: Session, tournament: Tournament, with_trashed: bool = False) -> List[Championship]:
    query = select(Championship).where(Championship.tournament_id == tournament.id).order_by(Championship.id)
    if not with_trashed:
        query = active(query, Championship)
    return list(session.exec(query).all())


def load_categories(session: Session, tournament: Tournament) -> List[Category]:
    """
    Categories attached through active championships, in championship order.

    Soft-deleted championships are skipped, so a trashed tournament's
    categories only come back after restore.
    """
    query = (
        select(Category)
        .join(Championship, Championship.category_id == Category.id)
        .where(Championship.tournament_id == tournament.id)
        .order_by(Championship.id)
    )
    return list(session.exec(active(query, Championship)).all())


def load_championship_settings(session: Session, tournament: Tournament) -> List[ChampionshipSettings]:
    query = (
        select(ChampionshipSettings)
        .join(Championship, ChampionshipSettings.championship_id == Championship.id)
        .where(Championship.tournament_id == tournament.id)
        .order_by(ChampionshipSettings.id)
    )
    query = active(active(query, Championship), ChampionshipSettings)
    return list(session.exec(query).all())


def load_teams(session: Session, tournament: Tournament) -> List[Team]:
    query = (
        select(Team)
        .join(Championship, Team.championship_id == Championship.id)
        .where(Championship.tournament_id == tournament.id)
        .order_by(Team.id)
    )
    return list(session.exec(active(query, Championship)).all())


def load_competitors(
    session: Session, tournament: Tournament, championship_id: Optional[int] = None
) -> List[Competitor]:
    """All competitors of the tournament; championship_id is accepted but does not filter"""
    query = (
        select(Competitor)
        .join(Championship, Competitor.championship_id == Championship.id)
        .where(Championship.tournament_id == tournament.id)
        .order_by(Competitor.id)
    )
    query = active(active(query, Championship), Competitor)
    return list(session.exec(query).all())


def load_trees(session: Session, tournament: Tournament) -> List[Tree]:
    query = (
        select(Tree)
        .join(Championship, Tree.championship_id == Championship.id)
        .where(Championship.tournament_id == tournament.id)
        .order_by(Tree.id)
    )
    return list(session.exec(active(query, Championship)).all())


def load_invites(session: Session, tournament: Tournament) -> List[Invite]:
    query = select(Invite).where(
        Invite.object_type == InvitableKind.TOURNAMENT.value,
        Invite.object_id == tournament.id,
    )
    return list(session.exec(query.order_by(Invite.id)).all())


# ============================================================================
# Categories and rule presets
# ============================================================================


def sync_categories(session: Session, tournament: Tournament, category_ids: Iterable[int]) -> Dict[str, List[int]]:
    """
    Make the tournament's categories exactly category_ids.

    - active championships outside the set are purged (detached)
    - trashed championships inside the set are restored
    - missing categories get a new championship

    Flushes but does not commit. Returns the category ids per outcome.
    """
    target = list(dict.fromkeys(category_ids))
    target_set = set(target)
    championships = load_championships(session, tournament, with_trashed=True)
    by_category = {championship.category_id: championship for championship in championships}

    changes: Dict[str, List[int]] = {"attached": [], "detached": [], "restored": []}

    for championship in championships:
        if not championship.is_deleted() and championship.category_id not in target_set:
            purge_championship(session, championship)
            changes["detached"].append(championship.category_id)

    for category_id in target:
        existing = by_category.get(category_id)
        if existing is None:
            session.add(Championship(tournament_id=tournament.id, category_id=category_id))
            changes["attached"].append(category_id)
        elif existing.is_deleted():
            restore_championship(session, existing)
            changes["restored"].append(category_id)

    session.flush()
    logger.debug("Synced categories of tournament %s: %s", tournament.id, changes)
    return changes


def set_and_configure_categories(
    session: Session,
    tournament: Tournament,
    rule_id: int,
    provider: Optional[RulePresetProvider] = None,
    commit: bool = True,
) -> List[ChampionshipSettings]:
    """
    Attach the categories of a rule preset and create their settings.

    Rule 0 or an unknown rule does nothing. Otherwise the tournament's
    categories become the preset's keys and every championship gets a new
    ChampionshipSettings row built from its category's entry (rows are not
    upserted: applying a preset twice leaves two rows per championship).

    Raises MissingPresetEntryError if an active championship's category is
    not in the preset. After the sync every active championship belongs to
    a preset category, so this only fires if the lookup itself is broken.

    Commits on success; with commit=False the rows are only flushed.
    """
    options = load_rules_options(rule_id, provider or default_provider())
    if options is None:
        return []

    sync_categories(session, tournament, options.keys())

    created: List[ChampionshipSettings] = []
    for championship in load_championships(session, tournament):
        rules = settings_for_championship(options, championship.id, championship.category_id)
        settings_row = ChampionshipSettings(**rules)
        session.add(settings_row)
        created.append(settings_row)

    if commit:
        session.commit()
        for settings_row in created:
            session.refresh(settings_row)
    else:
        session.flush()
    logger.info("Applied rule %s to tournament %s: %d championships configured", rule_id, tournament.id, len(created))
    return created


def build_category_list(session: Session, tournament: Tournament) -> Dict[int, str]:
    """championship id -> label (alias, else the category's built name) for team categories"""
    championships = session.exec(
        active(select(Championship), Championship)
        .join(Category, Championship.category_id == Category.id)
        .where(Championship.tournament_id == tournament.id, Category.is_team == True)  # noqa: E712
        .options(selectinload(Championship.category), selectinload(Championship.settings))
        .order_by(Championship.id)
    ).all()

    labels: Dict[int, str] = {}
    for championship in championships:
        category = championship.category
        labels[championship.id] = category.alias if category.alias else category.build_name().strip()
    return labels


def has_team_category(session: Session, tournament: Tournament) -> int:
    """Number of team categories attached through active (not soft-deleted) championships"""
    query = (
        select(func.count(Championship.id))
        .join(Category, Championship.category_id == Category.id)
        .where(Championship.tournament_id == tournament.id, Category.is_team == True)  # noqa: E712
    )
    return session.exec(active(query, Championship)).one()
