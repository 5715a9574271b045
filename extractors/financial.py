"""
Extrator dos itens financeiros da fatura (quadro "Itens da fatura").

Cada item é localizado por palavra-chave na linha e os tokens numéricos da
linha são interpretados com suposições posicionais específicas:

    Energia Elétrica kWh 100 0,95238095 95,23 0,74464000
                         ^qtd           ^valor (3º token)

Antes da leitura posicional, tenta-se o formato explícito
"<qtd> kWh ... R$ <valor>". A energia compensada é um crédito e por isso
seu valor é registrado como negativo.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from core.cascade import FieldCascade
from core.models import DocumentText
from extractors.reference import is_tabular_header
from extractors.utils import find_number_tokens, parse_br_number

LineItem = Tuple[float, float]

EXPLICIT_KWH_VALUE_RE = re.compile(
    r"(\d+(?:[.,]\d+)*)\s*kWh.*?R\$\s*:?\s*(-?\d+(?:[.,]\d+)*)", re.IGNORECASE
)
KWH_ONLY_RE = re.compile(r"(\d+(?:[.,]\d+)*)\s*kWh", re.IGNORECASE)

ELECTRIC_KEYWORD_RE = re.compile(r"Energia\s+El[ée]trica")
SCEEE_KEYWORD_RE = re.compile(r"Energia\s+SCEE")
COMPENSATED_KEYWORD_RE = re.compile(r"Energia\s+[Cc]ompensada")
PUBLIC_LIGHTING_KEYWORD_RE = re.compile(
    r"Contrib\s+Ilum\s+Publica|Ilumina[çc][ãa]o\s+P[úu]blica", re.IGNORECASE
)

TABULAR_TOTAL_RE = re.compile(r"(\d{1,3}(?:\.\d{3})*,\d{2})\s*$")
TOTAL_LINE_RE = re.compile(r"^TOTAL(?:\s+A\s+PAGAR)?\s*:?\s*(?:R\$\s*:?\s*)?(\d+(?:[.,]\d+)*)")
AMOUNT_DUE_RE = re.compile(
    r"valor\s+(?:total\s+)?a\s+pagar\s*:?\s*R\$\s*:?\s*(\d+(?:[.,]\d+)*)", re.IGNORECASE
)

# Posições dos tokens na leitura posicional (0 = primeiro número da linha)
KWH_TOKEN_INDEX = 0
VALUE_TOKEN_INDEX = 2


def _tokens_after_keyword(line: str, keyword_re: re.Pattern) -> List[str]:
    match = keyword_re.search(line)
    return find_number_tokens(line[match.end():] if match else line)


def parse_explicit(line: str, keyword_re: re.Pattern) -> Optional[LineItem]:
    """'150,75 kWh  R$ 135,80' -> (150.75, 135.8)."""
    match = EXPLICIT_KWH_VALUE_RE.search(line)
    if match:
        return parse_br_number(match.group(1)), parse_br_number(match.group(2))
    return None


def parse_positional(line: str, keyword_re: re.Pattern) -> Optional[LineItem]:
    """Formato tabular: 1º token = kWh, 3º token = valor em R$."""
    tokens = _tokens_after_keyword(line, keyword_re)
    if len(tokens) > max(KWH_TOKEN_INDEX, VALUE_TOKEN_INDEX):
        return parse_br_number(tokens[KWH_TOKEN_INDEX]), parse_br_number(tokens[VALUE_TOKEN_INDEX])
    return None


def parse_quantity_only(line: str, keyword_re: re.Pattern) -> Optional[LineItem]:
    """Só a quantidade em kWh (linha sem valor monetário)."""
    match = KWH_ONLY_RE.search(line)
    if match:
        return parse_br_number(match.group(1)), 0.0
    return None


LineParser = Callable[[str, re.Pattern], Optional[LineItem]]

LINE_PARSERS: List[LineParser] = [parse_explicit, parse_positional, parse_quantity_only]


@dataclass(frozen=True)
class LineItemSpec:
    """
    Descrição de um item de fatura.

    Attributes:
        field_prefix: Prefixo dos campos no registro (ex: 'energy_electric').
        keyword_re: Palavra-chave que identifica a linha do item.
        credit: Se True, o valor é um crédito e é registrado como negativo.
    """
    field_prefix: str
    keyword_re: re.Pattern
    credit: bool = False


LINE_ITEMS = [
    LineItemSpec("energy_electric", ELECTRIC_KEYWORD_RE),
    LineItemSpec("energy_sceee", SCEEE_KEYWORD_RE),
    LineItemSpec("energy_compensated", COMPENSATED_KEYWORD_RE, credit=True),
]


def _line_item_strategy(spec: LineItemSpec, parser: LineParser):
    def strategy(document: DocumentText) -> Optional[LineItem]:
        for line in document.lines:
            if not spec.keyword_re.search(line):
                continue
            item = parser(line, spec.keyword_re)
            if item is not None:
                kwh, value = abs(item[0]), abs(item[1])
                if spec.credit and value:
                    value = -value
                return kwh, value
        return None

    strategy.__name__ = f"{spec.field_prefix}_{parser.__name__}"
    return strategy


def line_item_cascade(spec: LineItemSpec) -> FieldCascade:
    return FieldCascade(
        spec.field_prefix,
        [_line_item_strategy(spec, parser) for parser in LINE_PARSERS],
        default=(0.0, 0.0),
    )


# =============================================================================
# ILUMINAÇÃO PÚBLICA E TOTAL
# =============================================================================


def public_lighting_last_token(document: DocumentText) -> Optional[float]:
    """Último número da linha 'Contrib Ilum Publica Municipal'."""
    for line in document.lines:
        if PUBLIC_LIGHTING_KEYWORD_RE.search(line):
            tokens = find_number_tokens(line)
            if tokens:
                return parse_br_number(tokens[-1]) or None
    return None


def public_lighting_cascade() -> FieldCascade:
    return FieldCascade("public_lighting_value", [public_lighting_last_token], default=0.0)


def total_from_tabular_header(document: DocumentText) -> Optional[float]:
    """Valor no fim da linha abaixo de 'Referente a ... Valor a pagar'."""
    lines = document.lines
    for i, line in enumerate(lines[:-1]):
        if is_tabular_header(line):
            match = TABULAR_TOTAL_RE.search(lines[i + 1])
            if match:
                return parse_br_number(match.group(1)) or None
    return None


def total_from_total_line(document: DocumentText) -> Optional[float]:
    """Linha iniciada por 'TOTAL' seguida do valor."""
    for line in document.lines:
        match = TOTAL_LINE_RE.match(line)
        if match:
            value = parse_br_number(match.group(1))
            if value:
                return value
    return None


def total_from_amount_due(document: DocumentText) -> Optional[float]:
    """'Valor a pagar: R$ 189,13'."""
    match = AMOUNT_DUE_RE.search(document.raw)
    if match:
        return parse_br_number(match.group(1)) or None
    return None


def total_cascade() -> FieldCascade:
    return FieldCascade(
        "total_value",
        [total_from_tabular_header, total_from_total_line, total_from_amount_due],
        default=0.0,
    )
