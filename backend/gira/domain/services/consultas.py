"""Projeções somente-leitura sobre um ``EstadoGira``."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Collection, List, Tuple

from ..entities import Entidade, EstadoGira, Medium
from ..regras import pode_atribuir
from ..taxonomia import Taxonomia


@dataclass(frozen=True)
class VisaoMedium:
    medium: Medium
    entidades: Tuple[Entidade, ...]


def entidades_ordenadas(medium: Medium, taxonomia: Taxonomia) -> List[Entidade]:
    # sorted é estável: empates mantêm a ordem de inserção
    return sorted(
        medium.entidades,
        key=lambda e: (taxonomia.indice_categoria(e.categoria), e.ordem),
    )


def mediums_disponiveis(
    estado: EstadoGira, categorias_ativas: Collection[str], taxonomia: Taxonomia
) -> List[Medium]:
    elegiveis = [
        m for m in estado if any(pode_atribuir(m, e, categorias_ativas) for e in m.entidades)
    ]
    return sorted(elegiveis, key=lambda m: taxonomia.rank_cargo(m.cargo))


def entidades_disponiveis(
    estado: EstadoGira, medium_id: str, categorias_ativas: Collection[str], taxonomia: Taxonomia
) -> List[Entidade]:
    medium = estado.obter_medium(medium_id)
    return [e for e in entidades_ordenadas(medium, taxonomia) if pode_atribuir(medium, e, categorias_ativas)]


def buscar_mediums(
    estado: EstadoGira, termo: str, categorias_ativas: Collection[str], taxonomia: Taxonomia
) -> List[VisaoMedium]:
    termo = (termo or "").strip().casefold()
    visoes: List[VisaoMedium] = []
    for medium in estado:
        da_gira = [e for e in entidades_ordenadas(medium, taxonomia) if e.categoria in categorias_ativas]
        if not termo or termo in medium.nome.casefold():
            visoes.append(VisaoMedium(medium, tuple(da_gira)))
            continue
        encontradas = tuple(e for e in da_gira if _entidade_corresponde(e, termo))
        if encontradas:
            visoes.append(VisaoMedium(medium, encontradas))
    # médiuns com consulentes primeiro, o resto na ordem original
    return sorted(visoes, key=lambda v: v.medium.total_consulentes == 0)


def _entidade_corresponde(entidade: Entidade, termo: str) -> bool:
    return (
        termo in entidade.nome.casefold()
        or termo in entidade.categoria.casefold()
        or any(termo in c.nome.casefold() for c in entidade.consulentes)
    )
