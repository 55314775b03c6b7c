"""
Agrégats du tableau de bord, recalculés à chaque demande.
Chaque répartition est une unique requête GROUP BY, identique sur les deux bases.
"""

from sqlalchemy import extract, func, literal_column, select
from sqlalchemy.orm import Session

from schoolrecords.models.payment import Payment
from schoolrecords.models.school_class import SchoolClass
from schoolrecords.models.student import Student
from schoolrecords.models.teacher import Teacher
from schoolrecords.schemas.dashboard import DashboardCharts, DashboardStats

UNASSIGNED_LABEL = "Unassigned"


def get_dashboard_stats(db: Session) -> DashboardStats:
    total_students = db.execute(select(func.count()).select_from(Student)).scalar() or 0
    total_teachers = db.execute(select(func.count()).select_from(Teacher)).scalar() or 0
    total_fees = db.execute(select(func.sum(Payment.amount_paid))).scalar() or 0.0

    return DashboardStats(
        total_students=total_students,
        total_teachers=total_teachers,
        total_fees_collected=float(total_fees),
    )


def get_student_count_per_class(db: Session) -> dict[str, int]:
    """Élèves par classe, triés par libellé ; les élèves sans classe sont regroupés."""
    # Littéral SQL et non paramètre lié : PostgreSQL exige la même expression dans GROUP BY
    class_name = func.coalesce(SchoolClass.name, literal_column(f"'{UNASSIGNED_LABEL}'")).label("class_label")
    rows = db.execute(
        select(class_name, func.count(Student.id))
        .select_from(Student)
        .outerjoin(SchoolClass, Student.class_id == SchoolClass.id)
        .group_by(class_name)
        .order_by(class_name)
    ).all()
    return {name: count for name, count in rows}


def get_gender_distribution(db: Session) -> dict[str, int]:
    rows = db.execute(
        select(Student.gender, func.count()).group_by(Student.gender)
    ).all()
    return {gender: count for gender, count in rows}


def get_fees_per_month(db: Session) -> dict[str, float]:
    """Total encaissé par mois, clés 'YYYY-MM' dans l'ordre chronologique."""
    year = extract("year", Payment.payment_date)
    month = extract("month", Payment.payment_date)
    rows = db.execute(
        select(year.label("year"), month.label("month"), func.sum(Payment.amount_paid))
        .group_by(year, month)
        .order_by(year, month)
    ).all()
    return {f"{int(y):04d}-{int(m):02d}": float(total) for y, m, total in rows}


def get_dashboard_charts(db: Session) -> DashboardCharts:
    return DashboardCharts(
        students_per_class=get_student_count_per_class(db),
        gender_distribution=get_gender_distribution(db),
        fees_per_month=get_fees_per_month(db),
    )
