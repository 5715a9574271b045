"""
Cascata de estratégias de extração por campo.

Cada campo da fatura é extraído por uma lista ORDENADA de estratégias
independentes. A primeira estratégia que encontra um valor vence e as
seguintes não são executadas. As estratégias mais estritas (ancoradas em
rótulo) vêm antes das mais soltas (estatísticas): precisão antes de recall.

Example:
    >>> cascade = FieldCascade("client_number", [by_label, by_top_digits])
    >>> cascade.run(DocumentText.from_raw("Nº DO CLIENTE\\n3001116735"))
    '3001116735'
"""
import logging
from typing import Any, Callable, Generic, Iterable, List, Optional, Tuple, TypeVar

from core.models import DocumentText

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Estratégia: função pura DocumentText -> valor ou None (não encontrou)
Strategy = Callable[[DocumentText], Optional[T]]


def _is_hit(value: Any) -> bool:
    return value is not None and value != "" and value != ()


class FieldCascade(Generic[T]):
    """
    Executa as estratégias de um campo em ordem de prioridade.

    Args:
        field_name: Nome do campo (para logs).
        strategies: Estratégias em ordem de prioridade.
        default: Valor retornado quando nenhuma estratégia encontra nada.
    """

    def __init__(self, field_name: str, strategies: Iterable[Strategy], default: Any = ""):
        self.field_name = field_name
        self.strategies: List[Strategy] = list(strategies)
        self.default = default

    def run_with_source(self, document: DocumentText) -> Tuple[Any, Optional[str]]:
        """
        Executa a cascata e informa qual estratégia venceu.

        Returns:
            Tuple[Any, Optional[str]]: (valor, nome da estratégia) ou
                (default, None) se a cascata esgotou.
        """
        for strategy in self.strategies:
            value = strategy(document)
            if _is_hit(value):
                name = getattr(strategy, "__name__", repr(strategy))
                logger.debug(f"{self.field_name}: '{value}' via {name}")
                return value, name

        logger.debug(f"{self.field_name}: nenhuma estratégia encontrou valor")
        return self.default, None

    def run(self, document: DocumentText) -> Any:
        """Executa a cascata e retorna só o valor."""
        return self.run_with_source(document)[0]

    def __len__(self) -> int:
        return len(self.strategies)

    def __repr__(self) -> str:
        return f"FieldCascade({self.field_name!r}, {len(self.strategies)} estratégias)"
