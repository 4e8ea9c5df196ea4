"""
Erreurs métier / Domain errors.
Levées par les services, converties en réponses HTTP dans main.py.
Raised by services, turned into HTTP responses in main.py.
"""


class DispatchError(Exception):
    """Erreur métier générique / Generic domain failure."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DispatchError):
    status_code = 404


class ReservationConflictError(DispatchError):
    """Camion non disponible pour réservation / Truck not available for reservation."""

    status_code = 409


class InvalidTransitionError(DispatchError):
    """Transition de statut interdite / Forbidden status transition."""

    status_code = 409


class ValidationError(DispatchError):
    status_code = 422
