"""
Erreurs typées de la couche de persistance.

Les erreurs métier (conflits, saisie invalide) héritent de ValueError, comme
les refus déjà levés par les services. Les messages restent présentables à
l'utilisateur : aucun détail du pilote SQL n'y figure.
"""


class RecordsError(Exception):
    """Base commune à toutes les erreurs de la couche de persistance."""


class BackendUnavailable(RecordsError):
    """Aucune base n'est joignable, ou le pool a été fermé."""


class SchemaError(RecordsError):
    """Échec de création ou de migration du schéma."""


class DuplicateKey(RecordsError, ValueError):
    """Clé primaire ou valeur unique déjà présente : rien n'a été écrit."""


class ConstraintViolation(RecordsError, ValueError):
    """Contrainte d'intégrité violée (ex. élève inexistant) : transaction annulée."""


class DependencyConflict(RecordsError, ValueError):
    """Suppression refusée : des lignes référencent encore l'enregistrement."""

    def __init__(self, message: str, count: int, dependency: str):
        super().__init__(message)
        self.count = count
        self.dependency = dependency


class LastAdminProtected(RecordsError, ValueError):
    """Suppression refusée : il doit toujours rester au moins un administrateur."""


class InvalidCredentials(RecordsError):
    """Identifiant ou mot de passe incorrect (cause volontairement non précisée)."""


class InvalidArgument(RecordsError, ValueError):
    """Argument hors domaine (ex. critère de recherche inconnu)."""
