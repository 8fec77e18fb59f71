from __future__ import annotations
from datetime import datetime
from typing import Optional
import uuid

from ..entities import EstadoGira, RegistroGira, ResumoMedium
from ..entities.medium import agora_utc
from ..enums import StatusConsulente


def contar_atendidos(estado: EstadoGira):
    """Pares (médium, atendidos) na ordem do estado, incluindo zeros."""
    for medium in estado:
        atendidos = sum(
            1
            for e in medium.entidades
            for c in e.consulentes
            if c.status == StatusConsulente.ATENDIDO
        )
        yield medium, atendidos


def arquivar_gira(estado: EstadoGira, agora: Optional[datetime] = None) -> RegistroGira:
    """Fotografa os atendimentos da gira atual sem alterar o estado.

    Médiuns sem nenhum consulente atendido não entram no resumo.
    """
    resumo = sorted(
        (ResumoMedium(medium.nome, atendidos) for medium, atendidos in contar_atendidos(estado) if atendidos),
        key=lambda r: r.medium_nome.casefold(),
    )
    return RegistroGira(
        id=str(uuid.uuid4()),
        data=agora or agora_utc(),
        resumo=tuple(resumo),
        total_atendidos=sum(r.atendidos for r in resumo),
    )
