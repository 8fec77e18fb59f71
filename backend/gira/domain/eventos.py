"""Eventos de domínio emitidos pelas operações.

Eventos são apenas informativos: carregam o que aconteceu para quem notifica
o usuário, e nenhuma regra depende deles.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class EventoGira:
    tipo = "evento"

    @property
    def descricao(self) -> str:
        return self.tipo

    def para_dict(self) -> dict:
        d = asdict(self)
        d["tipo"] = self.tipo
        d["descricao"] = self.descricao
        return d


@dataclass(frozen=True)
class MediumRegistrado(EventoGira):
    medium_id: str
    medium_nome: str
    entidades: int

    tipo = "medium_registrado"

    @property
    def descricao(self) -> str:
        return f"O(a) médium {self.medium_nome} foi cadastrado(a) com {self.entidades} entidade(s)."


@dataclass(frozen=True)
class MediumRemovido(EventoGira):
    medium_id: str
    medium_nome: str
    consulentes_removidos: int

    tipo = "medium_removido"

    @property
    def descricao(self) -> str:
        return f"O(a) médium {self.medium_nome} foi removido(a)."


@dataclass(frozen=True)
class MediumEditado(EventoGira):
    medium_id: str
    medium_nome: str
    entidades_removidas: Tuple[str, ...] = ()

    tipo = "medium_editado"

    @property
    def descricao(self) -> str:
        return f"Os dados de {self.medium_nome} foram atualizados."


@dataclass(frozen=True)
class PresencaAlterada(EventoGira):
    medium_id: str
    medium_nome: str
    presente: bool

    tipo = "presenca_alterada"

    @property
    def descricao(self) -> str:
        situacao = "presente" if self.presente else "ausente"
        return f"O(a) médium {self.medium_nome} foi marcado(a) como {situacao}."


@dataclass(frozen=True)
class DisponibilidadeAlterada(EventoGira):
    medium_id: str
    entidade_id: str
    entidade_nome: str
    disponivel: bool

    tipo = "disponibilidade_alterada"

    @property
    def descricao(self) -> str:
        situacao = "disponível" if self.disponivel else "indisponível"
        return f"A entidade {self.entidade_nome} foi marcada como {situacao}."


@dataclass(frozen=True)
class ConsulentesRemovidos(EventoGira):
    medium_nome: str
    quantidade: int
    entidade_nome: Optional[str] = None

    tipo = "consulentes_removidos"

    @property
    def descricao(self) -> str:
        alvo = self.entidade_nome or self.medium_nome
        return f"{self.quantidade} consulente(s) agendado(s) com {alvo} foram removidos."


@dataclass(frozen=True)
class ConsulenteAtribuido(EventoGira):
    medium_id: str
    entidade_id: str
    consulente_id: str
    consulente_nome: str
    entidade_nome: str

    tipo = "consulente_atribuido"

    @property
    def descricao(self) -> str:
        return f"{self.consulente_nome} foi agendado(a) com {self.entidade_nome}."


@dataclass(frozen=True)
class ConsulenteRemovido(EventoGira):
    medium_id: str
    entidade_id: str
    consulente_id: str
    consulente_nome: str

    tipo = "consulente_removido"

    @property
    def descricao(self) -> str:
        return f"{self.consulente_nome} foi removido(a) da lista."


@dataclass(frozen=True)
class StatusAlterado(EventoGira):
    consulente_id: str
    consulente_nome: str
    status: str

    tipo = "status_alterado"

    @property
    def descricao(self) -> str:
        return f"{self.consulente_nome} agora está {self.status}."


@dataclass(frozen=True)
class ConsulenteRenomeado(EventoGira):
    consulente_id: str
    nome_anterior: str
    nome: str

    tipo = "consulente_renomeado"

    @property
    def descricao(self) -> str:
        return f"{self.nome_anterior} agora se chama {self.nome}."


@dataclass(frozen=True)
class LimitesAtualizados(EventoGira):
    novo_limite: int
    mediums_atualizados: int

    tipo = "limites_atualizados"

    @property
    def descricao(self) -> str:
        if not self.mediums_atualizados:
            return "Nenhum médium elegível para a atualização global foi encontrado."
        return (
            f"O limite de entidades para {self.mediums_atualizados} médiuns "
            f"foi atualizado para {self.novo_limite}."
        )


@dataclass(frozen=True)
class CategoriasGiraAlteradas(EventoGira):
    categorias: Tuple[str, ...]

    tipo = "categorias_gira_alteradas"

    @property
    def descricao(self) -> str:
        if not self.categorias:
            return "Nenhuma categoria selecionada para a gira."
        return "Gira de " + ", ".join(self.categorias) + "."


@dataclass(frozen=True)
class GiraArquivada(EventoGira):
    registro_id: str
    total_atendidos: int

    tipo = "gira_arquivada"

    @property
    def descricao(self) -> str:
        return f"Gira arquivada com {self.total_atendidos} atendimento(s)."
