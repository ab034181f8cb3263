"""
Exceptions métier de l'API Rengus.

Les services lèvent ces exceptions ; les handlers enregistrés dans app.main
les traduisent en réponse JSON {"detail": ...} avec le code HTTP associé.
"""

from typing import Optional


class RengusError(Exception):
    """Base de toutes les erreurs métier."""

    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class BadRequestError(RengusError):
    """Champ obligatoire manquant ou combinaison de champs invalide."""

    status_code = 400
    default_detail = "Invalid request"


class UnauthenticatedError(RengusError):
    """Jeton absent, invalide ou expiré."""

    status_code = 401
    default_detail = "Access token missing"


class ForbiddenError(RengusError):
    """Rôle insuffisant ou ressource appartenant à une autre auto-école."""

    status_code = 403
    default_detail = "Access denied"


class NotFoundError(RengusError):
    status_code = 404
    default_detail = "Resource not found"


class ConflictError(RengusError):
    """Violation d'unicité ou ressource encore référencée ailleurs."""

    status_code = 409
    default_detail = "Resource conflict"
