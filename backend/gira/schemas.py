from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .domain import StatusConsulente


class ConsulenteOut(BaseModel):
    id: str
    nome: str
    status: StatusConsulente

    model_config = ConfigDict(from_attributes=True)


class EntidadeOut(BaseModel):
    id: str
    nome: str
    categoria: str
    limite: int
    ordem: int
    disponivel: bool
    consulentes: List[ConsulenteOut]

    model_config = ConfigDict(from_attributes=True)


class MediumOut(BaseModel):
    id: str
    nome: str
    presente: bool
    cargo: Optional[str] = None
    criado_em: datetime
    entidades: List[EntidadeOut]

    model_config = ConfigDict(from_attributes=True)


class EntidadeIn(BaseModel):
    nome: str
    categoria: str
    limite: int = Field(description="Quantidade máxima de consulentes; 0 = não atende")
    id: Optional[str] = Field(None, description="Informe para manter uma entidade existente na edição")


class MediumCreate(BaseModel):
    nome: str
    entidades: List[EntidadeIn]
    cargo: Optional[str] = None


class MediumUpdate(BaseModel):
    nome: Optional[str] = None
    entidades: Optional[List[EntidadeIn]] = None
    cargo: Optional[str] = Field(None, description="Envie null para remover o cargo; omita para manter")


class ConsulenteCreate(BaseModel):
    nome: str


class ConsulenteRename(BaseModel):
    nome: str


class StatusRequest(BaseModel):
    status: StatusConsulente


class LimiteRequest(BaseModel):
    limite: int


class CategoriasGira(BaseModel):
    categorias: List[str]


class EventoOut(BaseModel):
    tipo: str
    descricao: str


class RespostaOperacao(BaseModel):
    eventos: List[EventoOut]
    medium: Optional[MediumOut] = None


class VisaoMediumOut(BaseModel):
    medium: MediumOut
    entidades: List[EntidadeOut]

    model_config = ConfigDict(from_attributes=True)


class ResumoOut(BaseModel):
    medium_nome: str
    atendidos: int

    model_config = ConfigDict(from_attributes=True)


class RegistroOut(BaseModel):
    id: str
    data: datetime
    resumo: List[ResumoOut]
    total_atendidos: int

    model_config = ConfigDict(from_attributes=True)


class TaxonomiaOut(BaseModel):
    categorias: List[str]
    cargos: List[str]


class ApiState(BaseModel):
    mediums: List[MediumOut]
    categorias_gira: List[str]
    avisos_integridade: List[str]
