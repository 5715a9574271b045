"""
Módulo de utilidades compartilhadas para extratores de faturas.

Contém funções de parsing e normalização usadas por todos os extratores:
- Normalização do texto em linhas (base de todas as estratégias por linha)
- Parsing de números brasileiros (1.234,56)
- Normalização de meses em português (SET -> Setembro)
- Regex de datas dd/mm/yyyy e dd/mm

Nenhuma função deste módulo levanta exceção para entrada malformada:
todas falham de forma suave (0.0, None ou string vazia).
"""

import math
import re
import unicodedata
from typing import List, Optional

# =============================================================================
# REGEX COMPILADOS (evita recompilação a cada chamada)
# =============================================================================

# Data brasileira completa: dd/mm/yyyy (sem validação de calendário)
DATE_RE = re.compile(r"(\d{2}/\d{2}/\d{4})")

# Data curta: dd/mm (datas de leitura)
SHORT_DATE_RE = re.compile(r"(\d{2}/\d{2})")

# Token numérico simples: 150 / 150,75 / 1.960
NUMBER_TOKEN_RE = re.compile(r"\d+(?:[,.]\d+)*")

# Valor monetário com prefixo R$
MONEY_TOKEN_RE = re.compile(r"R\$\s*:?\s*(\d+(?:[.,]\d+)*)")

# Número com milhar em pontos: 1.960 / 12.345.678
_DOTTED_THOUSANDS_RE = re.compile(r"^\d{1,3}(?:\.\d{3})+$")

PT_MONTHS = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
]

# Abreviatura de 3 letras (sem acento) -> nome canônico
MONTH_ABBREVIATIONS = {
    "jan": "Janeiro",
    "fev": "Fevereiro",
    "mar": "Março",
    "abr": "Abril",
    "mai": "Maio",
    "jun": "Junho",
    "jul": "Julho",
    "ago": "Agosto",
    "set": "Setembro",
    "out": "Outubro",
    "nov": "Novembro",
    "dez": "Dezembro",
}

MONTH_ABBR_PATTERN = r"(?:JAN|FEV|MAR|ABR|MAI|JUN|JUL|AGO|SET|OUT|NOV|DEZ)"
MONTH_NAME_PATTERN = (
    r"(?:janeiro|fevereiro|mar[çc]o|abril|maio|junho|julho|agosto|"
    r"setembro|outubro|novembro|dezembro)"
)


# =============================================================================
# NORMALIZAÇÃO DE TEXTO
# =============================================================================


def split_lines(text: Optional[str]) -> List[str]:
    """
    Divide o texto em linhas limpas.

    Remove espaços nas pontas e descarta linhas vazias, preservando a ordem
    relativa. Nenhuma linha é descartada por causa do conteúdo.

    Args:
        text: Texto bruto extraído do PDF.

    Returns:
        List[str]: Linhas não vazias.

    Examples:
        >>> split_lines("  A \\n\\n   \\nB\\r\\n")
        ['A', 'B']
        >>> split_lines(None)
        []
    """
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def strip_accents(text: str) -> str:
    """Remove acentos (NFKD) mantendo o restante do texto."""
    if not text:
        return ""
    normalized = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


def capitalize_first(text: str) -> str:
    """'SETEMBRO' -> 'Setembro'."""
    if not text:
        return ""
    return text[0].upper() + text[1:].lower()


def has_digit(text: str) -> bool:
    return any(ch.isdigit() for ch in text)


# =============================================================================
# PARSING DE NÚMEROS
# =============================================================================


def parse_br_number(value: Optional[str], default: Optional[float] = 0.0) -> Optional[float]:
    """
    Converte número no formato brasileiro para float.

    Remove tudo que não for dígito, vírgula, ponto ou sinal. Regras:
    - vírgula presente: pontos são milhar, vírgula é decimal
    - só pontos no formato de milhar (1.960): pontos são milhar
    - só um ponto fora desse formato (67.58): ponto decimal

    Args:
        value: String com o número ("R$ 1.234,56", "150,75 kWh").
        default: Retornado quando a string não é um número.

    Returns:
        float: Valor numérico (nunca NaN/inf) ou ``default``.

    Examples:
        >>> parse_br_number("1.234,56")
        1234.56
        >>> parse_br_number("150,75")
        150.75
        >>> parse_br_number("abc")
        0.0
        >>> parse_br_number("abc", default=None) is None
        True
    """
    if not value:
        return default

    cleaned = re.sub(r"[^\d,.\-]", "", str(value))
    negative = cleaned.startswith("-")
    cleaned = cleaned.replace("-", "").strip(".,")
    if not cleaned or not has_digit(cleaned):
        return default

    if "," in cleaned:
        cleaned = cleaned.replace(".", "")
        # Apenas a última vírgula é decimal
        head, _, tail = cleaned.rpartition(",")
        cleaned = head.replace(",", "") + "." + tail
    elif _DOTTED_THOUSANDS_RE.match(cleaned):
        cleaned = cleaned.replace(".", "")
    elif cleaned.count(".") > 1:
        head, _, tail = cleaned.rpartition(".")
        cleaned = head.replace(".", "") + "." + tail

    try:
        number = float(cleaned)
    except ValueError:
        return default

    if math.isnan(number) or math.isinf(number):
        return default
    return -number if negative else number


def find_number_tokens(line: str) -> List[str]:
    """Tokens numéricos de uma linha, na ordem em que aparecem."""
    if not line:
        return []
    return NUMBER_TOKEN_RE.findall(line)


def find_money_values(text: str) -> List[float]:
    """
    Todos os valores monetários com prefixo ``R$`` do texto.

    Example:
        >>> find_money_values("Tarifa R$ 45,00 ... Total R$ 189,13")
        [45.0, 189.13]
    """
    if not text:
        return []
    values = []
    for token in MONEY_TOKEN_RE.findall(text):
        number = parse_br_number(token, default=None)
        if number is not None:
            values.append(number)
    return values


def safe_number(value) -> float:
    """Garante um float finito; qualquer outra coisa vira 0.0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


# =============================================================================
# MESES
# =============================================================================


def normalize_month(value: Optional[str]) -> str:
    """
    Normaliza um mês para o nome canônico em português.

    Aceita abreviatura de 3 letras ou nome completo, sem diferenciar
    maiúsculas nem acentos. Entrada não reconhecida volta capitalizada.

    Examples:
        >>> normalize_month("SET")
        'Setembro'
        >>> normalize_month("marco")
        'Março'
        >>> normalize_month("ABRIL")
        'Abril'
        >>> normalize_month("january")
        'January'
    """
    if not value:
        return ""
    cleaned = value.strip().rstrip(".")
    key = strip_accents(cleaned).lower()

    canonical = MONTH_ABBREVIATIONS.get(key[:3])
    if canonical and (len(key) == 3 or key == strip_accents(canonical).lower()):
        return canonical

    return capitalize_first(cleaned)


def is_canonical_month(value: Optional[str]) -> bool:
    return value in PT_MONTHS


def month_name(number: int) -> str:
    """Número do mês (1-12) -> nome canônico. Fora da faixa -> ''."""
    if 1 <= number <= 12:
        return PT_MONTHS[number - 1]
    return ""


def month_number(name: str) -> int:
    """Nome canônico -> número do mês (1-12). Desconhecido -> 0."""
    try:
        return PT_MONTHS.index(name) + 1
    except ValueError:
        return 0
