from kendo.models.audit_log import AuditLog
from kendo.models.category import Category
from kendo.models.championship import Championship
from kendo.models.championship_settings import ChampionshipSettings
from kendo.models.competitor import Competitor
from kendo.models.invite import InvitableKind, Invite
from kendo.models.team import Team
from kendo.models.tournament import Tournament
from kendo.models.tournament_level import TournamentLevel
from kendo.models.tree import Tree
from kendo.models.user import User
from kendo.models.venue import Venue

__all__ = [
    "AuditLog",
    "Category",
    "Championship",
    "ChampionshipSettings",
    "Competitor",
    "InvitableKind",
    "Invite",
    "Team",
    "Tournament",
    "TournamentLevel",
    "Tree",
    "User",
    "Venue",
]
