from .base import Base
from .patient import Patient
from .appointment import Appointment
from .bed import Bed
from .admission import Admission
from .inventory import InventoryItem

__all__ = ["Base", "Patient", "Appointment", "Bed", "Admission", "InventoryItem"]
