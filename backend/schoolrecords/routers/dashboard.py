"""
Router pour le tableau de bord : totaux et séries pour les graphiques.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schoolrecords.database import get_db
from schoolrecords.schemas.dashboard import DashboardCharts, DashboardStats
from schoolrecords.services import dashboard_service

router = APIRouter(prefix="/api/v1/dashboard", tags=["Tableau de bord"])


@router.get("/stats", response_model=DashboardStats, summary="Totaux du tableau de bord")
def get_stats(db: Session = Depends(get_db)):
    return dashboard_service.get_dashboard_stats(db)


@router.get("/charts", response_model=DashboardCharts, summary="Séries des graphiques")
def get_charts(db: Session = Depends(get_db)):
    return dashboard_service.get_dashboard_charts(db)
