"""Read-only neighborhood directory."""

from fastapi import APIRouter, HTTPException, status

from dongne_board.models import Neighborhood
from dongne_board.schemas.neighborhood import NeighborhoodResponse

from ..dependencies import SessionDep

router = APIRouter(prefix="/neighborhoods", tags=["neighborhoods"])


@router.get("/", response_model=list[NeighborhoodResponse])
async def list_neighborhoods(db: SessionDep) -> list[Neighborhood]:
    return db.query(Neighborhood).order_by(Neighborhood.name).all()


@router.get("/{name}", response_model=NeighborhoodResponse)
async def get_neighborhood(name: str, db: SessionDep) -> Neighborhood:
    """Look up a neighborhood by its full "City District Neighborhood" name."""
    neighborhood = db.query(Neighborhood).filter(Neighborhood.name == name).first()
    if neighborhood is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Neighborhood not found")
    return neighborhood
