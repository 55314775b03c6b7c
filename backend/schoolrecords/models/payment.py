from sqlalchemy import Column, Date, Float, ForeignKey, Integer, String

from schoolrecords.database import Base


class Payment(Base):
    """Paiement de frais de scolarité d'un élève."""
    __tablename__ = "student_payments"

    id = Column("payment_id", Integer, primary_key=True)
    student_id = Column(Integer, ForeignKey("students.std_id", ondelete="CASCADE"), nullable=True)
    amount_paid = Column(Float, nullable=False)
    payment_date = Column(Date, nullable=False)
    term = Column(String(50), nullable=True)
    academic_year = Column(Integer, nullable=True)
