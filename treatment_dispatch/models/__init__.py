"""
Modèles SQLAlchemy / SQLAlchemy models.
Importer tous les modèles ici pour que create_all les détecte.
Import all models here so create_all can detect them.
"""

from treatment_dispatch.models.tmc_center import TmcCenter
from treatment_dispatch.models.user import User, UserRole, UserTmcPreference
from treatment_dispatch.models.truck import Truck, TruckStatus
from treatment_dispatch.models.material import Material, MaterialType
from treatment_dispatch.models.ticket import BridgeTreatment, TicketPriority, TicketStatus, TreatmentTicket
from treatment_dispatch.models.audit import AuditLog
