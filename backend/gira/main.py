import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .domain import (
    MANTER,
    CapacityError,
    ConflictError,
    DadosEntidade,
    DataIntegrityError,
    DomainError,
    DuplicateError,
    NotFoundError,
    Resultado,
    ValidationError,
    entidades_ordenadas,
)
from .schemas import (
    ApiState,
    CategoriasGira,
    ConsulenteCreate,
    ConsulenteRename,
    EntidadeIn,
    EntidadeOut,
    EventoOut,
    LimiteRequest,
    MediumCreate,
    MediumOut,
    MediumUpdate,
    RegistroOut,
    RespostaOperacao,
    StatusRequest,
    TaxonomiaOut,
    VisaoMediumOut,
)
from .storage import GiraStore

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

STATUS_POR_ERRO = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateError: status.HTTP_409_CONFLICT,
    CapacityError: status.HTTP_409_CONFLICT,
    ConflictError: status.HTTP_409_CONFLICT,
    DataIntegrityError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

router = APIRouter()


def get_store(request: Request) -> GiraStore:
    return request.app.state.store


def _handle_domain_error(err: DomainError) -> None:
    codigo = STATUS_POR_ERRO.get(type(err), status.HTTP_400_BAD_REQUEST)
    if codigo >= 500:
        logger.error("Erro de integridade: %s", err)
    raise HTTPException(
        status_code=codigo,
        detail={"erro": type(err).__name__, "mensagem": str(err), "detalhes": err.detalhes},
    ) from err


def _dados_entidades(entidades: Optional[List[EntidadeIn]]) -> Optional[List[DadosEntidade]]:
    if entidades is None:
        return None
    return [DadosEntidade(nome=e.nome, categoria=e.categoria, limite=e.limite, id=e.id) for e in entidades]


def _serializar_medium(medium, store: GiraStore) -> MediumOut:
    out = MediumOut.model_validate(medium)
    out.entidades = [EntidadeOut.model_validate(e) for e in entidades_ordenadas(medium, store.taxonomia)]
    return out


def _resposta(resultado: Resultado, store: GiraStore, medium=None) -> RespostaOperacao:
    return RespostaOperacao(
        eventos=[EventoOut(tipo=e.tipo, descricao=e.descricao) for e in resultado.eventos],
        medium=_serializar_medium(medium, store) if medium is not None else None,
    )


# --- leitura ---
@router.get("/estado", response_model=ApiState)
def estado_atual(store: GiraStore = Depends(get_store)):
    estado = store.estado
    return ApiState(
        mediums=[_serializar_medium(m, store) for m in estado],
        categorias_gira=list(store.categorias_gira),
        avisos_integridade=[str(a) for a in store.avisos_integridade],
    )


@router.get("/taxonomia", response_model=TaxonomiaOut)
def taxonomia(store: GiraStore = Depends(get_store)):
    return TaxonomiaOut(categorias=list(store.taxonomia.categorias), cargos=list(store.taxonomia.cargos))


@router.get("/mediums", response_model=List[MediumOut])
def listar_mediums(presentes: bool = Query(default=False), store: GiraStore = Depends(get_store)):
    mediums = list(store.estado)
    if presentes:
        mediums = [m for m in mediums if m.presente]
    return [_serializar_medium(m, store) for m in mediums]


@router.get("/mediums/disponiveis", response_model=List[MediumOut])
def mediums_disponiveis(store: GiraStore = Depends(get_store)):
    return [_serializar_medium(m, store) for m in store.mediums_disponiveis()]


@router.get("/mediums/{medium_id}/entidades/disponiveis", response_model=List[EntidadeOut])
def entidades_disponiveis(medium_id: str, store: GiraStore = Depends(get_store)):
    try:
        return [EntidadeOut.model_validate(e) for e in store.entidades_disponiveis(medium_id)]
    except DomainError as err:
        _handle_domain_error(err)


@router.get("/busca", response_model=List[VisaoMediumOut])
def buscar(q: str = Query(default=""), store: GiraStore = Depends(get_store)):
    return [
        VisaoMediumOut(
            medium=_serializar_medium(v.medium, store),
            entidades=[EntidadeOut.model_validate(e) for e in v.entidades],
        )
        for v in store.buscar(q)
    ]


# --- médiuns ---
@router.post("/mediums", response_model=RespostaOperacao, status_code=status.HTTP_201_CREATED)
def registrar_medium(payload: MediumCreate, store: GiraStore = Depends(get_store)):
    try:
        resultado = store.registrar_medium(payload.nome, _dados_entidades(payload.entidades), payload.cargo)
        return _resposta(resultado, store, resultado.valor)
    except DomainError as err:
        _handle_domain_error(err)


@router.put("/mediums/{medium_id}", response_model=RespostaOperacao)
def editar_medium(medium_id: str, payload: MediumUpdate, store: GiraStore = Depends(get_store)):
    cargo = payload.cargo if "cargo" in payload.model_fields_set else MANTER
    try:
        resultado = store.editar_medium(
            medium_id, nome=payload.nome, entidades=_dados_entidades(payload.entidades), cargo=cargo
        )
        return _resposta(resultado, store, resultado.valor)
    except DomainError as err:
        _handle_domain_error(err)


@router.delete("/mediums/{medium_id}", response_model=RespostaOperacao)
def remover_medium(medium_id: str, store: GiraStore = Depends(get_store)):
    try:
        return _resposta(store.remover_medium(medium_id), store)
    except DomainError as err:
        _handle_domain_error(err)


@router.post("/mediums/{medium_id}/presenca", response_model=RespostaOperacao)
def alternar_presenca(medium_id: str, store: GiraStore = Depends(get_store)):
    try:
        resultado = store.alternar_presenca(medium_id)
        return _resposta(resultado, store, resultado.valor)
    except DomainError as err:
        _handle_domain_error(err)


@router.post("/mediums/{medium_id}/entidades/{entidade_id}/disponibilidade", response_model=RespostaOperacao)
def alternar_disponibilidade(medium_id: str, entidade_id: str, store: GiraStore = Depends(get_store)):
    try:
        resultado = store.alternar_disponibilidade(medium_id, entidade_id)
        return _resposta(resultado, store, resultado.estado.obter_medium(medium_id))
    except DomainError as err:
        _handle_domain_error(err)


@router.post("/entidades/limite", response_model=RespostaOperacao)
def atualizar_limites(payload: LimiteRequest, store: GiraStore = Depends(get_store)):
    try:
        return _resposta(store.atualizar_limites(payload.limite), store)
    except DomainError as err:
        _handle_domain_error(err)


# --- consulentes ---
@router.post(
    "/mediums/{medium_id}/entidades/{entidade_id}/consulentes",
    response_model=RespostaOperacao,
    status_code=status.HTTP_201_CREATED,
)
def atribuir_consulente(
    medium_id: str, entidade_id: str, payload: ConsulenteCreate, store: GiraStore = Depends(get_store)
):
    try:
        resultado = store.atribuir_consulente(medium_id, entidade_id, payload.nome)
        return _resposta(resultado, store, resultado.estado.obter_medium(medium_id))
    except DomainError as err:
        _handle_domain_error(err)


@router.delete(
    "/mediums/{medium_id}/entidades/{entidade_id}/consulentes/{consulente_id}",
    response_model=RespostaOperacao,
)
def remover_consulente(medium_id: str, entidade_id: str, consulente_id: str, store: GiraStore = Depends(get_store)):
    try:
        resultado = store.remover_consulente(medium_id, entidade_id, consulente_id)
        return _resposta(resultado, store, resultado.estado.obter_medium(medium_id))
    except DomainError as err:
        _handle_domain_error(err)


@router.post(
    "/mediums/{medium_id}/entidades/{entidade_id}/consulentes/{consulente_id}/status",
    response_model=RespostaOperacao,
)
def definir_status(
    medium_id: str,
    entidade_id: str,
    consulente_id: str,
    payload: StatusRequest,
    store: GiraStore = Depends(get_store),
):
    try:
        resultado = store.definir_status(medium_id, entidade_id, consulente_id, payload.status)
        return _resposta(resultado, store, resultado.estado.obter_medium(medium_id))
    except DomainError as err:
        _handle_domain_error(err)


@router.put(
    "/mediums/{medium_id}/entidades/{entidade_id}/consulentes/{consulente_id}",
    response_model=RespostaOperacao,
)
def renomear_consulente(
    medium_id: str,
    entidade_id: str,
    consulente_id: str,
    payload: ConsulenteRename,
    store: GiraStore = Depends(get_store),
):
    try:
        resultado = store.renomear_consulente(medium_id, entidade_id, consulente_id, payload.nome)
        return _resposta(resultado, store, resultado.estado.obter_medium(medium_id))
    except DomainError as err:
        _handle_domain_error(err)


# --- gira ---
@router.get("/gira/categorias", response_model=CategoriasGira)
def categorias_gira(store: GiraStore = Depends(get_store)):
    return CategoriasGira(categorias=list(store.categorias_gira))


@router.put("/gira/categorias", response_model=CategoriasGira)
def definir_categorias_gira(payload: CategoriasGira, store: GiraStore = Depends(get_store)):
    try:
        return CategoriasGira(categorias=list(store.definir_categorias_gira(payload.categorias)))
    except DomainError as err:
        _handle_domain_error(err)


@router.post("/gira/encerrar", response_model=RegistroOut, status_code=status.HTTP_201_CREATED)
def encerrar_gira(store: GiraStore = Depends(get_store)):
    try:
        registro, _ = store.encerrar_gira()
        return RegistroOut.model_validate(registro)
    except DomainError as err:
        _handle_domain_error(err)


@router.get("/gira/historico", response_model=List[RegistroOut])
def historico(limite: Optional[int] = Query(default=None, ge=1), store: GiraStore = Depends(get_store)):
    return [RegistroOut.model_validate(r) for r in store.historico(limite)]


def criar_app(store: Optional[GiraStore] = None) -> FastAPI:
    """Monta a aplicação. Sem ``store``, um é criado na inicialização a partir da configuração."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.store is None:
            app.state.store = GiraStore()
        logger.info("Gira pronta: %d médium(ns) carregados", len(app.state.store.estado))
        yield

    app = FastAPI(title="Gira", version="1.0.0", lifespan=lifespan)
    app.state.store = store
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.CORS_ORIGINS),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = criar_app()
