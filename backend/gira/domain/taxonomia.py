from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .exceptions import ValidationError


CATEGORIAS_PADRAO: Tuple[str, ...] = (
    "Exu",
    "Pombogira",
    "Malandros",
    "Pretos-Velhos",
    "Caboclos",
    "Boiadeiros",
    "Marinheiros",
    "Erês",
)


@dataclass(frozen=True)
class Taxonomia:
    """Categorias espirituais e cargos válidos, fixados na inicialização.

    A posição de cada categoria define a ordem de exibição das entidades; a
    posição de cada cargo define a prioridade dos médiuns na listagem.
    """

    categorias: Tuple[str, ...] = CATEGORIAS_PADRAO
    cargos: Tuple[str, ...] = ()

    @staticmethod
    def nova(categorias: Iterable[str], cargos: Iterable[str] = ()) -> "Taxonomia":
        lista = _normalizar(categorias)
        if not lista:
            raise ValidationError("A taxonomia precisa de ao menos uma categoria.")
        return Taxonomia(categorias=lista, cargos=_normalizar(cargos))

    def validar_categoria(self, categoria: str) -> str:
        if categoria not in self.categorias:
            raise ValidationError(f'Categoria "{categoria}" não existe.', categoria=categoria)
        return categoria

    def validar_cargo(self, cargo: Optional[str]) -> Optional[str]:
        if cargo is None:
            return None
        cargo = cargo.strip()
        if not cargo:
            return None
        if cargo not in self.cargos:
            raise ValidationError(f'Cargo "{cargo}" não existe.', cargo=cargo)
        return cargo

    def indice_categoria(self, categoria: str) -> int:
        try:
            return self.categorias.index(categoria)
        except ValueError:
            return len(self.categorias)

    def rank_cargo(self, cargo: Optional[str]) -> int:
        if cargo in self.cargos:
            return self.cargos.index(cargo)
        return len(self.cargos)


def _normalizar(valores: Iterable[str]) -> Tuple[str, ...]:
    vistos = []
    for v in valores:
        v = (v or "").strip()
        if v and v not in vistos:
            vistos.append(v)
    return tuple(vistos)
