from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, Tuple

from ..exceptions import NotFoundError
from .consulente import Consulente
from .entidade import Entidade
from .medium import Medium


@dataclass(frozen=True)
class EstadoGira:
    """Fotografia imutável de todos os médiuns da casa.

    Cada operação devolve um novo ``EstadoGira``; os nós não alterados são
    compartilhados com o estado anterior, então leitores que ainda seguram a
    versão antiga nunca enxergam uma alteração pela metade.
    """

    mediums: Tuple[Medium, ...] = ()
    _indice: Dict[str, int] = field(init=False, repr=False, compare=False, default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_indice", {m.id: i for i, m in enumerate(self.mediums)})

    def __iter__(self) -> Iterator[Medium]:
        return iter(self.mediums)

    def __len__(self) -> int:
        return len(self.mediums)

    def contem(self, medium_id: str) -> bool:
        return medium_id in self._indice

    def obter_medium(self, medium_id: str) -> Medium:
        pos = self._indice.get(medium_id)
        if pos is None:
            raise NotFoundError("Médium não encontrado.", medium_id=medium_id)
        return self.mediums[pos]

    def localizar(self, medium_id: str, entidade_id: str) -> Tuple[Medium, Entidade]:
        medium = self.obter_medium(medium_id)
        return medium, medium.obter_entidade(entidade_id)

    def localizar_consulente(
        self, medium_id: str, entidade_id: str, consulente_id: str
    ) -> Tuple[Medium, Entidade, Consulente]:
        medium, entidade = self.localizar(medium_id, entidade_id)
        return medium, entidade, entidade.obter_consulente(consulente_id)

    def com_medium(self, medium: Medium) -> "EstadoGira":
        return replace(self, mediums=self.mediums + (medium,))

    def substituir_medium(self, medium: Medium) -> "EstadoGira":
        pos = self._indice.get(medium.id)
        if pos is None:
            raise NotFoundError("Médium não encontrado.", medium_id=medium.id)
        return replace(self, mediums=self.mediums[:pos] + (medium,) + self.mediums[pos + 1:])

    def sem_medium(self, medium_id: str) -> "EstadoGira":
        self.obter_medium(medium_id)
        return replace(self, mediums=tuple(m for m in self.mediums if m.id != medium_id))

    def para_dict(self) -> dict:
        return {"mediums": [m.para_dict() for m in self.mediums]}
