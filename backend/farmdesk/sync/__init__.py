from .dispatcher import delete, save
from .loader import bootstrap
from .tables import FarmTable
from .views import FarmSnapshot

__all__ = ["FarmSnapshot", "FarmTable", "bootstrap", "delete", "save"]
