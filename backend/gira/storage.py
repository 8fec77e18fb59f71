import logging
import sqlite3
import threading
from typing import Callable, List, Optional, Sequence, Tuple

from . import config
from .db import Database
from .domain import (
    MANTER,
    AgendamentoService,
    DadosEntidade,
    DataIntegrityError,
    Entidade,
    EstadoGira,
    Medium,
    RegistroGira,
    Resultado,
    StatusConsulente,
    Taxonomia,
    VisaoMedium,
    arquivar_gira,
    buscar_mediums,
    entidades_disponiveis,
    mediums_disponiveis,
    reparar_estado,
    validar_invariantes,
    validar_registro,
)
from .domain.eventos import CategoriasGiraAlteradas, EventoGira, GiraArquivada

logger = logging.getLogger(__name__)

Ouvinte = Callable[[EventoGira], None]


class GiraStore:
    """Dono único do estado da gira.

    Mutações passam uma de cada vez pelo lock: a operação lê a fotografia
    atual, as invariantes são conferidas no resultado, a referência é trocada
    e o novo estado é salvo. Leitores só pegam a referência vigente, que é
    imutável, então nunca precisam do lock.
    """

    def __init__(self, database: Optional[Database] = None, taxonomia: Optional[Taxonomia] = None) -> None:
        self.db = database or Database(config.DB_PATH)
        self.taxonomia = taxonomia or Taxonomia.nova(config.CATEGORIAS, config.CARGOS)
        self.servico = AgendamentoService(self.taxonomia)
        self.avisos_integridade: List[DataIntegrityError] = []
        self._lock = threading.Lock()
        self._ouvintes: List[Ouvinte] = []
        self._estado = EstadoGira()
        self._categorias: Tuple[str, ...] = ()
        self._carregar()

    # --- leitura ---
    @property
    def estado(self) -> EstadoGira:
        return self._estado

    @property
    def categorias_gira(self) -> Tuple[str, ...]:
        return self._categorias

    def assinar(self, ouvinte: Ouvinte) -> None:
        self._ouvintes.append(ouvinte)

    def mediums_disponiveis(self) -> List[Medium]:
        return mediums_disponiveis(self._estado, self._categorias, self.taxonomia)

    def entidades_disponiveis(self, medium_id: str) -> List[Entidade]:
        return entidades_disponiveis(self._estado, medium_id, self._categorias, self.taxonomia)

    def buscar(self, termo: str) -> List[VisaoMedium]:
        return buscar_mediums(self._estado, termo, self._categorias, self.taxonomia)

    def historico(self, limite: Optional[int] = None) -> List[RegistroGira]:
        return self.db.listar_registros(limite or config.HISTORICO_LIMITE)

    # --- médiuns ---
    def registrar_medium(
        self, nome: str, entidades: Sequence[DadosEntidade], cargo: Optional[str] = None
    ) -> Resultado:
        return self._aplicar(lambda estado: self.servico.registrar_medium(estado, nome, entidades, cargo))

    def remover_medium(self, medium_id: str) -> Resultado:
        return self._aplicar(lambda estado: self.servico.remover_medium(estado, medium_id))

    def editar_medium(
        self,
        medium_id: str,
        nome: Optional[str] = None,
        entidades: Optional[Sequence[DadosEntidade]] = None,
        cargo=MANTER,
    ) -> Resultado:
        return self._aplicar(
            lambda estado: self.servico.editar_medium(estado, medium_id, nome, entidades, cargo)
        )

    def alternar_presenca(self, medium_id: str) -> Resultado:
        return self._aplicar(lambda estado: self.servico.alternar_presenca(estado, medium_id))

    def alternar_disponibilidade(self, medium_id: str, entidade_id: str) -> Resultado:
        return self._aplicar(
            lambda estado: self.servico.alternar_disponibilidade(estado, medium_id, entidade_id)
        )

    def atualizar_limites(self, novo_limite: int) -> Resultado:
        return self._aplicar(lambda estado: self.servico.atualizar_limites(estado, novo_limite))

    # --- consulentes ---
    def atribuir_consulente(self, medium_id: str, entidade_id: str, nome: str) -> Resultado:
        # as categorias são lidas já dentro do lock, junto com o estado
        return self._aplicar(
            lambda estado: self.servico.atribuir_consulente(
                estado, medium_id, entidade_id, nome, self._categorias
            )
        )

    def remover_consulente(self, medium_id: str, entidade_id: str, consulente_id: str) -> Resultado:
        return self._aplicar(
            lambda estado: self.servico.remover_consulente(estado, medium_id, entidade_id, consulente_id)
        )

    def definir_status(
        self, medium_id: str, entidade_id: str, consulente_id: str, status: StatusConsulente
    ) -> Resultado:
        return self._aplicar(
            lambda estado: self.servico.definir_status(estado, medium_id, entidade_id, consulente_id, status)
        )

    def renomear_consulente(self, medium_id: str, entidade_id: str, consulente_id: str, nome: str) -> Resultado:
        return self._aplicar(
            lambda estado: self.servico.renomear_consulente(estado, medium_id, entidade_id, consulente_id, nome)
        )

    # --- gira ---
    def definir_categorias_gira(self, categorias: Sequence[str]) -> Tuple[str, ...]:
        selecionadas = self.servico.selecionar_categorias(categorias)
        with self._lock:
            self._categorias = selecionadas
            try:
                self.db.salvar_categorias(selecionadas)
            except sqlite3.Error:
                logger.exception("Não foi possível salvar a seleção da gira.")
        self._notificar((CategoriasGiraAlteradas(selecionadas),))
        return selecionadas

    def encerrar_gira(self) -> Tuple[RegistroGira, Resultado]:
        """Arquiva os atendimentos da gira atual e limpa todas as entidades.

        Se o registro não puder ser salvo, nada é limpo e o erro sobe.
        """
        with self._lock:
            registro = arquivar_gira(self._estado)
            validar_registro(registro)
            self.db.salvar_registro(registro)
            resultado = self.servico.limpar_atendimentos(self._estado)
            self._trocar(resultado.estado)
        eventos = (GiraArquivada(registro.id, registro.total_atendidos),) + resultado.eventos
        self._notificar(eventos)
        return registro, Resultado(resultado.estado, eventos, registro)

    # --- ciclo de vida ---
    def _carregar(self) -> None:
        try:
            dados = self.db.carregar_estado()
            categorias = self.db.carregar_categorias() or []
        except sqlite3.Error:
            logger.exception("Falha ao ler o estado salvo; iniciando vazio.")
            return

        estado, problemas = reparar_estado(dados, self.taxonomia)
        for problema in problemas:
            logger.warning("Integridade do estado salvo: %s", problema)
        self.avisos_integridade = problemas
        self._estado = estado

        validas = [c for c in categorias if isinstance(c, str) and c in self.taxonomia.categorias]
        if len(validas) != len(categorias):
            logger.warning(
                "Categorias desconhecidas removidas da gira: %r", [c for c in categorias if c not in validas]
            )
        self._categorias = self.servico.selecionar_categorias(validas)

        if problemas:
            self._salvar()
        logger.info("Estado carregado: %d médium(ns), gira %s", len(estado), list(self._categorias))

    def _aplicar(self, operacao: Callable[[EstadoGira], Resultado]) -> Resultado:
        with self._lock:
            resultado = operacao(self._estado)
            if resultado.estado is not self._estado:
                self._trocar(resultado.estado)
        self._notificar(resultado.eventos)
        return resultado

    def _trocar(self, novo: EstadoGira) -> None:
        validar_invariantes(novo)
        self._estado = novo
        self._salvar()

    def _salvar(self) -> None:
        try:
            self.db.salvar_estado(self._estado.para_dict())
        except sqlite3.Error:
            logger.exception("Não foi possível salvar o estado da gira.")

    def _notificar(self, eventos: Sequence[EventoGira]) -> None:
        for evento in eventos:
            logger.info(evento.descricao)
            for ouvinte in self._ouvintes:
                try:
                    ouvinte(evento)
                except Exception:
                    logger.exception("Ouvinte falhou ao tratar %s", evento.tipo)
