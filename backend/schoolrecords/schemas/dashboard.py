"""
Schémas Pydantic du tableau de bord. Calculés à chaque demande, jamais stockés.
"""

from typing import Dict

from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_students: int
    total_teachers: int
    total_fees_collected: float


class DashboardCharts(BaseModel):
    """Répartitions agrégées ; l'ordre des clés suit le ORDER BY de chaque requête."""
    students_per_class: Dict[str, int]
    gender_distribution: Dict[str, int]
    fees_per_month: Dict[str, float]
