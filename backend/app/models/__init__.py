# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.

from app.models.school import School  # noqa: F401 : doit précéder users, students, dossiers
from app.models.user import User, UserRole  # noqa: F401
from app.models.student import Student  # noqa: F401
from app.models.exam_center import ExamCenter  # noqa: F401
from app.models.dossier import Dossier, DossierStep, DossierStepName, DossierStatus  # noqa: F401
