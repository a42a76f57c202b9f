from datetime import date, datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, field_validator, model_validator
from sqlmodel import Session

from kendo.database import get_session
from kendo.models.tournament import TYPE_INVITATION, TYPE_OPEN, Tournament
from kendo.models.tournament_level import LEVEL_NAMES
from kendo.rule_presets import MissingPresetEntryError, RulePresetProvider, default_provider
from kendo.services import tournament_service
from kendo.services.tournament_service import TournamentNotFoundError, TournamentStateError

router = APIRouter()


def get_rule_preset_provider() -> RulePresetProvider:
    return default_provider()


def _validate_type(v):
    if v is not None and v not in (TYPE_INVITATION, TYPE_OPEN):
        raise ValueError("type must be 0 (invitation) or 1 (open)")
    return v


def _validate_level(v):
    if v is not None and v not in LEVEL_NAMES:
        raise ValueError("level_id must be between 1 and 8")
    return v


class TournamentCreate(BaseModel):
    name: str
    date_ini: Optional[date] = None
    date_fin: Optional[date] = None
    register_date_limit: Optional[date] = None
    sport: str = "Kendo"
    promoter: Optional[str] = None
    host_organization: Optional[str] = None
    technical_assistance: Optional[str] = None
    category: Optional[str] = None
    rule_id: int = 0
    type: int = TYPE_OPEN
    venue_id: Optional[int] = None
    level_id: int = 1
    user_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _validate_type(v)

    @field_validator("level_id")
    @classmethod
    def validate_level(cls, v):
        return _validate_level(v)

    @model_validator(mode="after")
    def validate_date_range(self):
        if self.date_ini and self.date_fin and self.date_fin < self.date_ini:
            raise ValueError("date_fin must be >= date_ini")
        return self


class TournamentUpdate(BaseModel):
    name: Optional[str] = None
    date_ini: Optional[date] = None
    date_fin: Optional[date] = None
    register_date_limit: Optional[date] = None
    sport: Optional[str] = None
    promoter: Optional[str] = None
    host_organization: Optional[str] = None
    technical_assistance: Optional[str] = None
    category: Optional[str] = None
    rule_id: Optional[int] = None
    type: Optional[int] = None
    venue_id: Optional[int] = None
    level_id: Optional[int] = None

    @field_validator("name", "sport", "rule_id", "type", "level_id", mode="before")
    @classmethod
    def reject_null(cls, v, info):
        # Omit a field to leave it unchanged; null would clear a NOT NULL column
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _validate_type(v)

    @field_validator("level_id")
    @classmethod
    def validate_level(cls, v):
        return _validate_level(v)

    @model_validator(mode="after")
    def validate_date_range(self):
        if self.date_ini and self.date_fin and self.date_fin < self.date_ini:
            raise ValueError("date_fin must be >= date_ini")
        return self


class TournamentResponse(BaseModel):
    id: int
    slug: str
    name: str
    date_ini: Optional[date]
    date_fin: Optional[date]
    register_date_limit: Optional[date]
    sport: str
    promoter: Optional[str]
    host_organization: Optional[str]
    technical_assistance: Optional[str]
    rule_id: int
    type: int
    venue_id: Optional[int]
    level_id: int
    user_id: Optional[int]
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime]
    # Derived flags for display logic
    is_open: bool
    needs_invitation: bool
    is_deleted: bool

    @classmethod
    def from_tournament(cls, tournament: Tournament) -> "TournamentResponse":
        return cls(
            **{name: getattr(tournament, name) for name in Tournament.model_fields},
            is_open=tournament.is_open(),
            needs_invitation=tournament.needs_invitation(),
            is_deleted=tournament.is_deleted(),
        )


class RuleRequest(BaseModel):
    rule_id: int


class RuleResponse(BaseModel):
    rule_id: int
    category_ids: List[int]
    settings_created: int


class CategoryListResponse(BaseModel):
    category_ids: List[int]
    has_team_category: int


def _get_or_404(session: Session, slug: str, with_trashed: bool = False) -> Tournament:
    try:
        return tournament_service.get_tournament_by_slug(session, slug, with_trashed=with_trashed)
    except TournamentNotFoundError:
        raise HTTPException(status_code=404, detail="Tournament not found")


@router.get("/tournaments", response_model=List[TournamentResponse])
def list_tournaments(with_trashed: bool = False, session: Session = Depends(get_session)):
    """List tournaments (soft-deleted ones only with with_trashed=true)"""
    tournaments = tournament_service.list_tournaments(session, with_trashed=with_trashed)
    return [TournamentResponse.from_tournament(t) for t in tournaments]


@router.post("/tournaments", response_model=TournamentResponse, status_code=201)
def create_tournament(
    tournament_data: TournamentCreate,
    session: Session = Depends(get_session),
    provider: RulePresetProvider = Depends(get_rule_preset_provider),
):
    """Create a tournament and apply its rule preset, if any"""
    data = tournament_data.model_dump()
    owner_id = data.pop("user_id")
    try:
        tournament = tournament_service.create_tournament(session, data, owner_id=owner_id, commit=False)
        tournament_service.set_and_configure_categories(
            session, tournament, tournament.rule_id, provider, commit=False
        )
        session.commit()
        session.refresh(tournament)
    except MissingPresetEntryError as e:
        session.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to create tournament: {str(e)}")
    return TournamentResponse.from_tournament(tournament)


@router.get("/tournaments/{slug}", response_model=TournamentResponse)
def get_tournament(slug: str, session: Session = Depends(get_session)):
    """Get a tournament by slug"""
    return TournamentResponse.from_tournament(_get_or_404(session, slug))


@router.put("/tournaments/{slug}", response_model=TournamentResponse)
def update_tournament(slug: str, tournament_data: TournamentUpdate, session: Session = Depends(get_session)):
    """Update a tournament; the slug does not follow name changes"""
    tournament = _get_or_404(session, slug)
    changes = tournament_data.model_dump(exclude_unset=True)
    try:
        tournament = tournament_service.update_tournament(session, tournament, changes)
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to update tournament: {str(e)}")
    return TournamentResponse.from_tournament(tournament)


@router.delete("/tournaments/{slug}", status_code=204)
def delete_tournament(slug: str, session: Session = Depends(get_session)):
    """Soft-delete a tournament: championships are trashed, invites are removed"""
    tournament = _get_or_404(session, slug)
    try:
        tournament_service.delete_tournament(session, tournament)
        return Response(status_code=204)
    except TournamentStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to delete tournament: {str(e)}")


@router.post("/tournaments/{slug}/restore", response_model=TournamentResponse)
def restore_tournament(slug: str, session: Session = Depends(get_session)):
    """Restore a soft-deleted tournament with all of its championships"""
    tournament = _get_or_404(session, slug, with_trashed=True)
    try:
        tournament_service.restore_tournament(session, tournament)
    except TournamentStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to restore tournament: {str(e)}")
    return TournamentResponse.from_tournament(tournament)


@router.post("/tournaments/{slug}/rules", response_model=RuleResponse)
def configure_rules(
    slug: str,
    request: RuleRequest,
    session: Session = Depends(get_session),
    provider: RulePresetProvider = Depends(get_rule_preset_provider),
):
    """Attach the categories of a rule preset and create their settings"""
    tournament = _get_or_404(session, slug)
    try:
        created = tournament_service.set_and_configure_categories(session, tournament, request.rule_id, provider)
    except MissingPresetEntryError as e:
        session.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to configure rules: {str(e)}")

    categories =tournament_service.load_categories(session, tournament)
    return RuleResponse(
        rule_id=request.rule_id,
        category_ids=tournament.get_category_list(categories),
        settings_created=len(created),
    )


@router.get("/tournaments/{slug}/categories", response_model=CategoryListResponse)
def get_categories(slug: str, session: Session = Depends(get_session)):
    """Category ids attached to the tournament"""
    tournament = _get_or_404(session, slug)
    categories = tournament_service.load_categories(session, tournament)
    return CategoryListResponse(
        category_ids=tournament.get_category_list(categories),
        has_team_category=tournament_service.has_team_category(session, tournament),
    )


@router.get("/tournaments/{slug}/team-categories", response_model=Dict[int, str])
def get_team_categories(slug: str, session: Session = Depends(get_session)):
    """Team championships of the tournament: championship id -> label"""
    tournament = _get_or_404(session, slug)
    return tournament_service.build_category_list(session, tournament)
