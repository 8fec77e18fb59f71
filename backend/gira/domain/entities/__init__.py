from .consulente import Consulente
from .entidade import Entidade
from .medium import Medium
from .estado import EstadoGira
from .registro import RegistroGira, ResumoMedium

__all__ = [
    "Consulente",
    "Entidade",
    "Medium",
    "EstadoGira",
    "RegistroGira",
    "ResumoMedium",
]
