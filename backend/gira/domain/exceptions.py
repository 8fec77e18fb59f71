from typing import Any, Dict, Optional


class DomainError(Exception):
    """Erro genérico da camada de domínio."""

    def __init__(self, mensagem: str, **detalhes: Any) -> None:
        super().__init__(mensagem)
        self.mensagem = mensagem
        self.detalhes: Dict[str, Any] = detalhes

    def __str__(self) -> str:
        return self.mensagem


class ValidationError(DomainError):
    """Dados inválidos para a operação solicitada."""


class NotFoundError(DomainError):
    """Identificador referenciado não existe."""


class DuplicateError(DomainError):
    """Nome repetido onde a unicidade é exigida."""


class CapacityError(DomainError):
    """Atribuição bloqueada por presença, disponibilidade, limite ou categoria."""


class ConflictError(DomainError):
    """Alteração estrutural deixaria consulentes órfãos ou acima do limite."""


class DataIntegrityError(DomainError):
    """Estado persistido viola as invariantes do domínio."""

    def __init__(self, regra: str, mensagem: str, registro: Optional[str] = None, **detalhes: Any) -> None:
        super().__init__(f"[{regra}] {mensagem}", registro=registro, **detalhes)
        self.regra = regra
        self.registro = registro
