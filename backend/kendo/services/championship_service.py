"""
Championship cascades.

- delete: soft-deletes the championship with its settings and competitors
- restore: brings all three back
- purge: hard-deletes the championship and every row hanging off it

None of these commit; the caller owns the transaction.
"""
import logging

from sqlmodel import Session, select

from kendo.models.championship import Championship
from kendo.models.championship_settings import ChampionshipSettings
from kendo.models.competitor import Competitor
from kendo.models.soft_delete import active, only_trashed
from kendo.models.team import Team
from kendo.models.tree import Tree

logger = logging.getLogger(__name__)


def delete_championship(session: Session, championship: Championship) -> None:
    settings_rows = session.exec(
        active(select(ChampionshipSettings), ChampionshipSettings).where(
            ChampionshipSettings.championship_id == championship.id
        )
    ).all()
    competitors = session.exec(
        active(select(Competitor), Competitor).where(Competitor.championship_id == championship.id)
    ).all()

    for row in [*settings_rows, *competitors]:
        row.mark_deleted()
        session.add(row)

    championship.mark_deleted()
    session.add(championship)
    logger.debug(
        "Soft-deleted championship %s (%d settings, %d competitors)",
        championship.id,
        len(settings_rows),
        len(competitors),
    )


def restore_championship(session: Session, championship: Championship) -> None:
    settings_rows = session.exec(
        only_trashed(select(ChampionshipSettings), ChampionshipSettings).where(
            ChampionshipSettings.championship_id == championship.id
        )
    ).all()
    competitors = session.exec(
        only_trashed(select(Competitor), Competitor).where(Competitor.championship_id == championship.id)
    ).all()

    for row in [*settings_rows, *competitors]:
        row.mark_restored()
        session.add(row)

    championship.mark_restored()
    session.add(championship)
    logger.debug("Restored championship %s", championship.id)


def purge_championship(session: Session, championship: Championship) -> None:
    """Hard delete; children first, then the championship row"""
    for model in (ChampionshipSettings, Competitor, Team, Tree):
        rows = session.exec(select(model).where(model.championship_id == championship.id)).all()
        for row in rows:
            session.delete(row)
    session.flush()
    # Drop any stale in-memory settings collection before deleting the parent
    session.expire(championship, ["settings"])

    session.delete(championship)
    logger.debug("Purged championship %s", championship.id)
