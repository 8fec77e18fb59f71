from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Collection, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..entities import Consulente, Entidade, EstadoGira, Medium
from ..enums import StatusConsulente
from ..eventos import (
    ConsulenteAtribuido,
    ConsulenteRemovido,
    ConsulenteRenomeado,
    ConsulentesRemovidos,
    DisponibilidadeAlterada,
    EventoGira,
    LimitesAtualizados,
    MediumEditado,
    MediumRegistrado,
    MediumRemovido,
    PresencaAlterada,
    StatusAlterado,
)
from ..exceptions import (
    CapacityError,
    ConflictError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from ..regras import esvaziar_medium, motivo_bloqueio, sem_consulentes
from ..taxonomia import Taxonomia


class _Manter:
    def __repr__(self) -> str:
        return "MANTER"


MANTER: Any = _Manter()


@dataclass(frozen=True)
class DadosEntidade:
    """Entidade como chega de um cadastro ou edição. ``id`` só existe na edição."""

    nome: str
    categoria: str
    limite: int
    id: Optional[str] = None


@dataclass(frozen=True)
class Resultado:
    estado: EstadoGira
    eventos: Tuple[EventoGira, ...] = ()
    valor: Any = None


@dataclass
class AgendamentoService:
    """Regras de negócio da gira.

    Cada operação recebe o estado atual e devolve um ``Resultado`` com o novo
    estado e os eventos emitidos. Toda validação acontece antes de qualquer
    construção, então uma falha nunca deixa alteração parcial.
    """

    taxonomia: Taxonomia = field(default_factory=Taxonomia)

    # --- médiuns ---
    def registrar_medium(
        self,
        estado: EstadoGira,
        nome: str,
        entidades: Sequence[DadosEntidade],
        cargo: Optional[str] = None,
    ) -> Resultado:
        nome = _nome_obrigatorio(nome, "O nome do médium é obrigatório.")
        if not entidades:
            raise ValidationError("Nome e entidades são obrigatórios.")
        self._validar_entidades(entidades)
        cargo = self.taxonomia.validar_cargo(cargo)

        medium = Medium.novo(
            nome,
            tuple(
                Entidade.nova(d.nome, d.categoria, d.limite, ordem=i)
                for i, d in enumerate(entidades)
            ),
            cargo=cargo,
        )
        evento = MediumRegistrado(medium.id, medium.nome, len(medium.entidades))
        return Resultado(estado.com_medium(medium), (evento,), medium)

    def remover_medium(self, estado: EstadoGira, medium_id: str) -> Resultado:
        medium = estado.obter_medium(medium_id)
        evento = MediumRemovido(medium.id, medium.nome, medium.total_consulentes)
        return Resultado(estado.sem_medium(medium_id), (evento,), medium)

    def editar_medium(
        self,
        estado: EstadoGira,
        medium_id: str,
        nome: Optional[str] = None,
        entidades: Optional[Sequence[DadosEntidade]] = None,
        cargo: Any = MANTER,
    ) -> Resultado:
        medium = estado.obter_medium(medium_id)
        alteracoes: Dict[str, Any] = {}

        if nome is not None:
            alteracoes["nome"] = _nome_obrigatorio(nome, "O nome do médium é obrigatório.")
        if cargo is not MANTER:
            alteracoes["cargo"] = self.taxonomia.validar_cargo(cargo)

        removidas: Tuple[str, ...] = ()
        if entidades is not None:
            if not entidades:
                raise ValidationError("Nome e entidades são obrigatórios.")
            self._validar_entidades(entidades)
            novas, removidas = self._diff_entidades(medium, entidades)
            alteracoes["entidades"] = novas

        atualizado = replace(medium, **alteracoes)
        novo = estado.substituir_medium(atualizado)

        # consulentes de uma entidade que mudou de categoria passam a concorrer com os da nova
        anteriores = {e.id: e.categoria for e in medium.entidades}
        for e in atualizado.entidades:
            if e.consulentes and anteriores.get(e.id, e.categoria) != e.categoria:
                for c in e.consulentes:
                    _conferir_nome_na_categoria(novo, e.categoria, c.nome, ignorar=c.id)

        evento = MediumEditado(atualizado.id, atualizado.nome, removidas)
        return Resultado(novo, (evento,), atualizado)

    def alternar_presenca(self, estado: EstadoGira, medium_id: str) -> Resultado:
        medium = estado.obter_medium(medium_id)
        eventos: List[EventoGira] = []
        if medium.presente:
            atualizado, removidos = esvaziar_medium(medium)
            atualizado = replace(atualizado, presente=False)
            if removidos:
                eventos.append(ConsulentesRemovidos(medium.nome, removidos))
        else:
            atualizado = replace(medium, presente=True)
        eventos.insert(0, PresencaAlterada(medium.id, medium.nome, atualizado.presente))
        return Resultado(estado.substituir_medium(atualizado), tuple(eventos), atualizado)

    def alternar_disponibilidade(self, estado: EstadoGira, medium_id: str, entidade_id: str) -> Resultado:
        medium, entidade = estado.localizar(medium_id, entidade_id)
        eventos: List[EventoGira] = []
        if entidade.disponivel:
            atualizada, removidos = sem_consulentes(entidade)
            atualizada = replace(atualizada, disponivel=False)
            if removidos:
                eventos.append(ConsulentesRemovidos(medium.nome, removidos, entidade_nome=entidade.nome))
        else:
            atualizada = replace(entidade, disponivel=True)
        eventos.insert(
            0, DisponibilidadeAlterada(medium.id, entidade.id, entidade.nome, atualizada.disponivel)
        )
        novo = estado.substituir_medium(medium.substituir_entidade(atualizada))
        return Resultado(novo, tuple(eventos), atualizada)

    def atualizar_limites(self, estado: EstadoGira, novo_limite: int) -> Resultado:
        """Aplica um limite único a todas as entidades.

        Médiuns com cargo e entidades com limite zero ficam de fora.
        """
        if not _limite_valido(novo_limite):
            raise ValidationError("O limite deve ser um número igual ou maior que zero.", limite=novo_limite)

        novos: List[Medium] = []
        for medium in estado:
            if medium.cargo:
                continue
            entidades = []
            for e in medium.entidades:
                if e.limite == 0:
                    entidades.append(e)
                    continue
                if e.disponivel and e.ocupacao > novo_limite:
                    raise ConflictError(
                        f"A entidade {e.nome} já tem {e.ocupacao} consulentes agendados.",
                        medium_id=medium.id,
                        entidade_id=e.id,
                    )
                entidades.append(replace(e, limite=novo_limite))
            novos.append(replace(medium, entidades=tuple(entidades)))

        novo_estado = estado
        for medium in novos:
            novo_estado = novo_estado.substituir_medium(medium)
        evento = LimitesAtualizados(novo_limite, len(novos))
        return Resultado(novo_estado, (evento,), len(novos))

    # --- consulentes ---
    def atribuir_consulente(
        self,
        estado: EstadoGira,
        medium_id: str,
        entidade_id: str,
        nome: str,
        categorias_ativas: Collection[str],
    ) -> Resultado:
        nome = _nome_obrigatorio(nome, "O nome do consulente é obrigatório.")
        medium, entidade = estado.localizar(medium_id, entidade_id)

        motivo = motivo_bloqueio(medium, entidade, categorias_ativas)
        if motivo:
            raise CapacityError(motivo, medium_id=medium_id, entidade_id=entidade_id)

        _conferir_nome_na_categoria(estado, entidade.categoria, nome)

        consulente = Consulente.novo(nome)
        atualizada = entidade.com_consulentes(entidade.consulentes + (consulente,))
        evento = ConsulenteAtribuido(medium.id, entidade.id, consulente.id, consulente.nome, entidade.nome)
        novo = estado.substituir_medium(medium.substituir_entidade(atualizada))
        return Resultado(novo, (evento,), consulente)

    def remover_consulente(
        self, estado: EstadoGira, medium_id: str, entidade_id: str, consulente_id: str
    ) -> Resultado:
        medium, entidade, consulente = estado.localizar_consulente(medium_id, entidade_id, consulente_id)
        atualizada = entidade.com_consulentes(tuple(c for c in entidade.consulentes if c.id != consulente_id))
        evento = ConsulenteRemovido(medium.id, entidade.id, consulente.id, consulente.nome)
        novo = estado.substituir_medium(medium.substituir_entidade(atualizada))
        return Resultado(novo, (evento,), consulente)

    def definir_status(
        self,
        estado: EstadoGira,
        medium_id: str,
        entidade_id: str,
        consulente_id: str,
        status: Union[StatusConsulente, str],
    ) -> Resultado:
        try:
            status = StatusConsulente(status)
        except ValueError as err:
            raise ValidationError(f'Status "{status}" inválido.', status=status) from err
        medium, entidade, consulente = estado.localizar_consulente(medium_id, entidade_id, consulente_id)

        # marcar de novo o mesmo status desfaz a marcação
        novo_status = StatusConsulente.AGENDADO if consulente.status == status else status
        atualizado = consulente.com_status(novo_status)
        evento = StatusAlterado(consulente.id, consulente.nome, novo_status.value)
        novo = estado.substituir_medium(
            medium.substituir_entidade(entidade.substituir_consulente(atualizado))
        )
        return Resultado(novo, (evento,), atualizado)

    def renomear_consulente(
        self,
        estado: EstadoGira,
        medium_id: str,
        entidade_id: str,
        consulente_id: str,
        nome: str,
    ) -> Resultado:
        nome = _nome_obrigatorio(nome, "O nome do consulente não pode ficar vazio.")
        medium, entidade, consulente = estado.localizar_consulente(medium_id, entidade_id, consulente_id)
        if consulente.nome == nome:
            return Resultado(estado, (), consulente)
        _conferir_nome_na_categoria(estado, entidade.categoria, nome, ignorar=consulente.id)
        atualizado = consulente.renomeado(nome)
        evento = ConsulenteRenomeado(consulente.id, consulente.nome, nome)
        novo = estado.substituir_medium(
            medium.substituir_entidade(entidade.substituir_consulente(atualizado))
        )
        return Resultado(novo, (evento,), atualizado)

    def limpar_atendimentos(self, estado: EstadoGira) -> Resultado:
        """Esvazia todas as entidades; usado ao encerrar a gira."""
        novo = estado
        total = 0
        eventos: List[EventoGira] = []
        for medium in estado:
            if not medium.total_consulentes:
                continue
            vazio, removidos = esvaziar_medium(medium)
            novo = novo.substituir_medium(vazio)
            total += removidos
            eventos.append(ConsulentesRemovidos(medium.nome, removidos))
        return Resultado(novo, tuple(eventos), total)

    # --- gira ---
    def selecionar_categorias(self, categorias: Iterable[str]) -> Tuple[str, ...]:
        """Valida e ordena as categorias abertas na gira."""
        selecionadas: List[str] = []
        for c in categorias:
            self.taxonomia.validar_categoria(c)
            if c not in selecionadas:
                selecionadas.append(c)
        selecionadas.sort(key=self.taxonomia.indice_categoria)
        return tuple(selecionadas)

    # --- auxiliares ---
    def _validar_entidades(self, entidades: Sequence[DadosEntidade]) -> None:
        for d in entidades:
            _nome_obrigatorio(d.nome, "Toda entidade precisa de um nome.")
            if not _limite_valido(d.limite):
                raise ValidationError(
                    f"Limite inválido para a entidade {d.nome.strip()}.", entidade=d.nome, limite=d.limite
                )
            self.taxonomia.validar_categoria(d.categoria)

        nomes = set()
        ids = set()
        for d in entidades:
            chave = d.nome.strip().casefold()
            if chave in nomes:
                raise DuplicateError(f"Entidade {d.nome.strip()} informada mais de uma vez.", entidade=d.nome)
            nomes.add(chave)
            if d.id is not None:
                if d.id in ids:
                    raise DuplicateError("Entidade informada mais de uma vez.", entidade_id=d.id)
                ids.add(d.id)

    def _diff_entidades(
        self, medium: Medium, entidades: Sequence[DadosEntidade]
    ) -> Tuple[Tuple[Entidade, ...], Tuple[str, ...]]:
        atuais = {e.id: e for e in medium.entidades}
        mantidas = {d.id for d in entidades if d.id is not None}

        for d in entidades:
            if d.id is not None and d.id not in atuais:
                raise NotFoundError("Entidade não encontrada.", medium_id=medium.id, entidade_id=d.id)

        removidas = tuple(e.id for e in medium.entidades if e.id not in mantidas)
        for entidade_id in removidas:
            e = atuais[entidade_id]
            if e.consulentes:
                raise ConflictError(
                    f"Não é possível remover a entidade {e.nome} com consulentes agendados. "
                    "Remova os consulentes primeiro.",
                    medium_id=medium.id,
                    entidade_id=e.id,
                )

        novas: List[Entidade] = []
        for ordem, d in enumerate(entidades):
            if d.id is None:
                novas.append(Entidade.nova(d.nome, d.categoria, d.limite, ordem=ordem))
                continue
            e = atuais[d.id]
            if e.disponivel and e.ocupacao > d.limite:
                raise ConflictError(
                    f"A entidade {e.nome} já tem {e.ocupacao} consulentes; o limite não pode ser {d.limite}.",
                    medium_id=medium.id,
                    entidade_id=e.id,
                )
            novas.append(replace(e, nome=d.nome.strip(), categoria=d.categoria, limite=d.limite, ordem=ordem))
        return tuple(novas), removidas


def _nome_obrigatorio(nome: Optional[str], mensagem: str) -> str:
    nome = (nome or "").strip()
    if not nome:
        raise ValidationError(mensagem)
    return nome


def _limite_valido(limite: Any) -> bool:
    return isinstance(limite, int) and not isinstance(limite, bool) and limite >= 0


def _conferir_nome_na_categoria(
    estado: EstadoGira, categoria: str, nome: str, ignorar: Optional[str] = None
) -> None:
    """Um consulente só pode estar em uma entidade por categoria, em qualquer médium."""
    chave = nome.strip().casefold()
    for m in estado:
        for e in m.entidades:
            if e.categoria != categoria:
                continue
            if any(c.id != ignorar and c.nome.strip().casefold() == chave for c in e.consulentes):
                raise DuplicateError(
                    f'{nome.strip()} já está agendado(a) na categoria "{categoria}". '
                    "Um consulente só pode ser agendado em uma entidade por categoria.",
                    medium_id=m.id,
                    entidade_id=e.id,
                )
