# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.
# Sans cet import, les FK comme teacher_assignments.teacher_id → teachers.tch_id
# échouent avec NoReferencedTableError si teacher.py n'est pas chargé.

from schoolrecords.models.student import Student  # noqa: F401
from schoolrecords.models.admin import Admin  # noqa: F401
from schoolrecords.models.teacher import Teacher  # noqa: F401
from schoolrecords.models.subject import Subject  # noqa: F401
from schoolrecords.models.assignment import TeacherAssignment  # noqa: F401
from schoolrecords.models.school_class import SchoolClass  # noqa: F401
from schoolrecords.models.attendance import AttendanceRecord  # noqa: F401
from schoolrecords.models.payment import Payment  # noqa: F401
