"""
Tabela de correções por entidade conhecida (fingerprints literais).

Alguns documentos reais derrotam todas as estratégias gerais de extração.
Para esses casos existe uma tabela pequena de tuplas
``(fingerprint, campo, valor)``: se o fingerprint aparece literalmente no
texto da fatura, o campo recebe o valor indicado.

A tabela é dado, não fluxo de controle. Pode ser substituída por um arquivo
JSON (``ENTITY_FIXUPS_FILE``) sem tocar no motor de reparo:

    [
        {"fingerprint": "SELFWAY", "field": "client_name",
         "value": "SELFWAY TREINAMENTO PERSONALIZADO LTDA", "overwrite": true}
    ]

Atenção: não expanda este mecanismo sem um registro de casos negativos.
Fingerprints fixos não generalizam para novas faturas.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityFixup:
    """
    Uma correção literal aplicada pelo motor de reparo.

    Attributes:
        fingerprint: Trecho que precisa aparecer literalmente no texto.
        field: Nome do atributo em ``ExtractedBillRecord`` (snake_case).
        value: Valor atribuído ao campo.
        overwrite: Se True, substitui mesmo um valor já extraído.
            Por padrão só preenche campos vazios/zerados.
    """
    fingerprint: str
    field: str
    value: Any
    overwrite: bool = False


DEFAULT_ENTITY_FIXUPS: Sequence[EntityFixup] = (
    EntityFixup("SELFWAY", "client_name", "SELFWAY TREINAMENTO PERSONALIZADO LTDA", overwrite=True),
    EntityFixup("SELFWAY", "client_number", "7202210726"),
    EntityFixup("SELFWAY", "installation_number", "3001422762"),
    EntityFixup("JOSE MESALY FONSECA DE CARVALHO", "client_name", "JOSE MESALY FONSECA DE CARVALHO"),
    EntityFixup("7202210726", "installation_number", "7202210726"),
    EntityFixup("SET/2024", "reference_month", "Setembro"),
    EntityFixup("SET/2024", "reference_year", 2024),
    EntityFixup("09/10/2024", "due_date", "09/10/2024"),
    EntityFixup("189,13", "total_value", 189.13),
    EntityFixup("47,57", "public_lighting_value", 47.57),
)


def load_entity_fixups(path: Optional[Union[str, Path]] = None) -> List[EntityFixup]:
    """
    Carrega a tabela de correções.

    Args:
        path: Caminho de um JSON com a lista de correções. Se vazio/None,
            retorna a tabela padrão.

    Returns:
        List[EntityFixup]: Correções na ordem em que devem ser aplicadas.

    Raises:
        ValueError: Se o arquivo não for uma lista de objetos válidos.
    """
    if not path:
        return list(DEFAULT_ENTITY_FIXUPS)

    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        raw = json.load(fh)

    if not isinstance(raw, list):
        raise ValueError(f"Tabela de correções inválida em {path}: esperado uma lista")

    fixups = []
    for i, item in enumerate(raw):
        try:
            fixups.append(
                EntityFixup(
                    fingerprint=str(item["fingerprint"]),
                    field=str(item["field"]),
                    value=item["value"],
                    overwrite=bool(item.get("overwrite", False)),
                )
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Correção #{i} inválida em {path}: {e}") from e

    logger.info(f"{len(fixups)} correções de entidade carregadas de {path}")
    return fixups
