"""Hotel routes."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from wlp.database import get_db
from wlp.models.hotel import Hotel
from wlp.schemas.admin import HotelOut
from wlp.security.guard import require_authenticated
from wlp.security.principal import Principal

router = APIRouter()


@router.get("")
def list_hotels(principal: Principal = Depends(require_authenticated), db: Session = Depends(get_db)):
    """List hotels by name."""
    hotels = db.query(Hotel).order_by(Hotel.name).all()
    return {"hotels": [HotelOut.model_validate(h) for h in hotels]}
