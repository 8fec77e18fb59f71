"""Camada de domínio da gira: médiuns, entidades e consulentes."""

from .enums import StatusConsulente
from .entities import Consulente, Entidade, Medium, EstadoGira, RegistroGira, ResumoMedium
from .taxonomia import CATEGORIAS_PADRAO, Taxonomia
from .regras import motivo_bloqueio, pode_atribuir
from .services import (
    MANTER,
    AgendamentoService,
    DadosEntidade,
    Resultado,
    VisaoMedium,
    arquivar_gira,
    buscar_mediums,
    entidades_disponiveis,
    entidades_ordenadas,
    mediums_disponiveis,
    reparar_estado,
    validar_invariantes,
    validar_registro,
)
from .exceptions import (
    CapacityError,
    ConflictError,
    DataIntegrityError,
    DomainError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "StatusConsulente",
    "Consulente",
    "Entidade",
    "Medium",
    "EstadoGira",
    "RegistroGira",
    "ResumoMedium",
    "CATEGORIAS_PADRAO",
    "Taxonomia",
    "motivo_bloqueio",
    "pode_atribuir",
    "MANTER",
    "AgendamentoService",
    "DadosEntidade",
    "Resultado",
    "VisaoMedium",
    "arquivar_gira",
    "buscar_mediums",
    "entidades_disponiveis",
    "entidades_ordenadas",
    "mediums_disponiveis",
    "reparar_estado",
    "validar_invariantes",
    "validar_registro",
    "CapacityError",
    "ConflictError",
    "DataIntegrityError",
    "DomainError",
    "DuplicateError",
    "NotFoundError",
    "ValidationError",
]
