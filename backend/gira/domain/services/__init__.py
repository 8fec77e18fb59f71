from .agendamento_service import MANTER, AgendamentoService, DadosEntidade, Resultado
from .arquivamento import arquivar_gira, contar_atendidos
from .consultas import (
    VisaoMedium,
    buscar_mediums,
    entidades_disponiveis,
    entidades_ordenadas,
    mediums_disponiveis,
)
from .integridade import reparar_estado, validar_invariantes, validar_registro

__all__ = [
    "MANTER",
    "AgendamentoService",
    "DadosEntidade",
    "Resultado",
    "arquivar_gira",
    "contar_atendidos",
    "VisaoMedium",
    "buscar_mediums",
    "entidades_disponiveis",
    "entidades_ordenadas",
    "mediums_disponiveis",
    "reparar_estado",
    "validar_invariantes",
    "validar_registro",
]
