"""Regras de capacidade e disponibilidade.

``motivo_bloqueio`` é a única implementação das condições de atribuição;
``pode_atribuir`` e as mensagens de ``CapacityError`` derivam dela.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Collection, Optional, Tuple

from .entities import Entidade, Medium


def motivo_bloqueio(
    medium: Medium, entidade: Entidade, categorias_ativas: Collection[str]
) -> Optional[str]:
    if not medium.presente:
        return f"O(a) médium {medium.nome} está ausente."
    if not entidade.disponivel:
        return f"A entidade {entidade.nome} está indisponível."
    if entidade.limite <= 0:
        return f"A entidade {entidade.nome} não recebe consulentes."
    if entidade.ocupacao >= entidade.limite:
        return f"A entidade {entidade.nome} atingiu o limite de {entidade.limite} consulentes."
    if entidade.categoria not in categorias_ativas:
        return f'A categoria "{entidade.categoria}" não faz parte da gira atual.'
    return None


def pode_atribuir(medium: Medium, entidade: Entidade, categorias_ativas: Collection[str]) -> bool:
    return motivo_bloqueio(medium, entidade, categorias_ativas) is None


def sem_consulentes(entidade: Entidade) -> Tuple[Entidade, int]:
    """Esvazia a entidade, devolvendo também quantos consulentes saíram."""
    return entidade.com_consulentes(()), entidade.ocupacao


def esvaziar_medium(medium: Medium) -> Tuple[Medium, int]:
    removidos = 0
    entidades = []
    for e in medium.entidades:
        vazia, qtd = sem_consulentes(e)
        entidades.append(vazia)
        removidos += qtd
    return replace(medium, entidades=tuple(entidades)), removidos
