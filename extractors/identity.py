"""
Extratores de identificação: número do cliente, número da instalação e
nome do titular.

Cada campo é uma cascata (``FieldCascade``) de estratégias independentes,
da mais estrita (ancorada no rótulo impresso pela distribuidora) para a mais
solta (qualquer sequência de dígitos perto do topo do documento).
"""

import re
from typing import Optional, Sequence

from config import settings
from core.cascade import FieldCascade
from core.models import DocumentText
from extractors.utils import has_digit, strip_accents

# =============================================================================
# NÚMERO DO CLIENTE
# =============================================================================

CLIENT_LABEL_RE = re.compile(r"N[º°o]\s*\.?\s*DO\s*CLIENTE", re.IGNORECASE)
CLIENT_SAME_LINE_RE = re.compile(r"N[º°o]\s*\.?\s*DO\s*CLIENTE\s*:?\s*(\d+)", re.IGNORECASE)

CLIENT_PHRASE_PATTERNS = [
    re.compile(r"cliente:?\s*(\d+)", re.IGNORECASE),
    re.compile(r"cliente\s+n[º°o]\s*(\d+)", re.IGNORECASE),
    re.compile(r"c[óo]digo\s+do\s+cliente:?\s*(\d+)", re.IGNORECASE),
    re.compile(r"n[º°o]\s+cliente:?\s*(\d+)", re.IGNORECASE),
]

NEAR_KEYWORD_DIGITS_RE = re.compile(r"\b(\d{7,12})\b")
TOP_CLIENT_DIGITS_RE = re.compile(r"\b(\d{7,10})\b")


def _label_index(lines: Sequence[str], label_re: re.Pattern) -> int:
    for i, line in enumerate(lines):
        if label_re.search(line):
            return i
    return -1


def _digits_after_label(lines: Sequence[str], label_re: re.Pattern) -> Optional[str]:
    """Linha seguinte ao rótulo, quando ela é composta só por dígitos."""
    index = _label_index(lines, label_re)
    if index >= 0 and index + 1 < len(lines):
        next_line = lines[index + 1].strip()
        if next_line.isdigit():
            return next_line
    return None


def _digits_on_label_line(lines: Sequence[str], label_re: re.Pattern, same_line_re: re.Pattern) -> Optional[str]:
    index = _label_index(lines, label_re)
    if index >= 0:
        match = same_line_re.search(lines[index])
        if match:
            return match.group(1)
    return None


def _first_phrase_match(text: str, patterns: Sequence[re.Pattern]) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def client_number_after_label(document: DocumentText) -> Optional[str]:
    """'Nº DO CLIENTE' com o número na linha de baixo."""
    return _digits_after_label(document.lines, CLIENT_LABEL_RE)


def client_number_same_line(document: DocumentText) -> Optional[str]:
    """'Nº DO CLIENTE: 3001116735' na mesma linha."""
    return _digits_on_label_line(document.lines, CLIENT_LABEL_RE, CLIENT_SAME_LINE_RE)


def client_number_from_phrases(document: DocumentText) -> Optional[str]:
    """Frases comuns: 'cliente: 123', 'código do cliente 123', etc."""
    return _first_phrase_match(document.raw, CLIENT_PHRASE_PATTERNS)


def client_number_near_keyword(document: DocumentText) -> Optional[str]:
    """Dígitos (7-12) na linha que cita 'cliente' ou nas duas seguintes."""
    lines = document.lines
    for i, line in enumerate(lines):
        if "cliente" in line.lower():
            for candidate in lines[i:i + 3]:
                match = NEAR_KEYWORD_DIGITS_RE.search(candidate)
                if match:
                    return match.group(1)
    return None


def client_number_top_digits(max_lines: int = None):
    """Fábrica: primeira sequência de 7-10 dígitos nas primeiras linhas."""
    limit = max_lines if max_lines is not None else settings.HEADER_SCAN_LINES

    def client_number_top_digits(document: DocumentText) -> Optional[str]:
        for line in document.head(limit):
            match = TOP_CLIENT_DIGITS_RE.search(line)
            if match:
                return match.group(1)
        return None

    return client_number_top_digits


def client_number_cascade(header_lines: int = None) -> FieldCascade:
    return FieldCascade(
        "client_number",
        [
            client_number_after_label,
            client_number_same_line,
            client_number_from_phrases,
            client_number_near_keyword,
            client_number_top_digits(header_lines),
        ],
        default="",
    )


# =============================================================================
# NÚMERO DA INSTALAÇÃO
# =============================================================================

INSTALLATION_LABEL_RE = re.compile(r"N[º°o]\s*\.?\s*DA\s*INSTALA[ÇC][ÃA]O", re.IGNORECASE)
INSTALLATION_SAME_LINE_RE = re.compile(
    r"N[º°o]\s*\.?\s*DA\s*INSTALA[ÇC][ÃA]O\s*:?\s*(\d+)", re.IGNORECASE
)

INSTALLATION_PHRASE_PATTERNS = [
    re.compile(r"INSTALA[ÇC][ÃA]O:?\s*(\d+)", re.IGNORECASE),
    re.compile(r"INSTALA[ÇC][ÃA]O\s+N[º°o]:?\s*(\d+)", re.IGNORECASE),
    re.compile(r"N[º°o]\s+INSTALA[ÇC][ÃA]O:?\s*(\d+)", re.IGNORECASE),
]


def installation_number_after_label(document: DocumentText) -> Optional[str]:
    """'Nº DA INSTALAÇÃO' com o número na linha de baixo."""
    return _digits_after_label(document.lines, INSTALLATION_LABEL_RE)


def installation_number_same_line(document: DocumentText) -> Optional[str]:
    return _digits_on_label_line(document.lines, INSTALLATION_LABEL_RE, INSTALLATION_SAME_LINE_RE)


def installation_number_from_phrases(document: DocumentText) -> Optional[str]:
    return _first_phrase_match(document.raw, INSTALLATION_PHRASE_PATTERNS)


def installation_number_near_keyword(document: DocumentText) -> Optional[str]:
    """Dígitos (7-12) na linha que cita 'instalação' ou na seguinte."""
    lines = document.lines
    for i, line in enumerate(lines):
        if "instalacao" in strip_accents(line).lower():
            for candidate in lines[i:i + 2]:
                match = NEAR_KEYWORD_DIGITS_RE.search(candidate)
                if match:
                    return match.group(1)
    return None


def installation_number_known_prefix(prefixes: Sequence[str] = None, max_lines: int = None):
    """
    Fábrica: número com prefixo típico da distribuidora (ex: 3001xxxxxx)
    nas primeiras linhas.
    """
    prefixes = tuple(prefixes) if prefixes is not None else settings.INSTALLATION_PREFIXES
    limit = max_lines if max_lines is not None else settings.INSTALLATION_SCAN_LINES
    alternatives = "|".join(re.escape(p) for p in prefixes)
    pattern = re.compile(rf"\b((?:{alternatives})\d{{6}})\b") if prefixes else None

    def installation_number_known_prefix(document: DocumentText) -> Optional[str]:
        if pattern is None:
            return None
        for line in document.head(limit):
            match = pattern.search(line)
            if match:
                return match.group(1)
        return None

    return installation_number_known_prefix


def installation_number_cascade(prefixes: Sequence[str] = None, scan_lines: int = None) -> FieldCascade:
    return FieldCascade(
        "installation_number",
        [
            installation_number_after_label,
            installation_number_same_line,
            installation_number_from_phrases,
            installation_number_near_keyword,
            installation_number_known_prefix(prefixes, scan_lines),
        ],
        default="",
    )


# =============================================================================
# NOME DO CLIENTE
# =============================================================================

_UPPER = "A-ZÀÁÂÃÄÅÇÈÉÊËÌÍÎÏÒÓÔÕÖÙÚÛÜÝ"
_LOWER = "a-zàáâãäåçèéêëìíîïòóôõöùúûüý"

LABELED_NAME_PATTERNS = [
    re.compile(rf"CLIENTE:[ \t]*([{_UPPER} \t.\-&]+)(?:\n|CPF|CNPJ)", re.IGNORECASE),
    re.compile(rf"CONSUMIDOR:[ \t]*([{_UPPER} \t.\-&]+)(?:\n|CPF|CNPJ)", re.IGNORECASE),
    re.compile(rf"NOME:[ \t]*([{_UPPER} \t.\-&]+)(?:\n|CPF|CNPJ)", re.IGNORECASE),
]

ALL_CAPS_LINE_RE = re.compile(rf"^[{_UPPER}\s.]+$")
PROPER_CASE_LINE_RE = re.compile(rf"^(?:[{_UPPER}][{_LOWER}]+\s)+[{_UPPER}][{_LOWER}]+$")
ADDRESS_LINE_RE = re.compile(r"\b(?:Rua|Av|Avenida|Alameda|Pra[çc]a|Travessa)\b|\bR\.\s", re.IGNORECASE)
TAX_ID_LABEL_RE = re.compile(r"\b(?:CPF|CNPJ)\b")

# Linhas em maiúsculas do cabeçalho que não são nomes de titular
NOT_A_NAME_KEYWORDS = (
    "NOTA FISCAL",
    "DOCUMENTO AUXILIAR",
    "DISTRIBUI",
    "ENERGIA",
    "FATURA",
    "CONTA DE",
    "SEGUNDA VIA",
    "REFERENTE",
    "VENCIMENTO",
)


def _looks_like_header(line: str) -> bool:
    upper = strip_accents(line).upper()
    return any(keyword in upper for keyword in NOT_A_NAME_KEYWORDS)


def client_name_labeled(document: DocumentText) -> Optional[str]:
    """'CLIENTE: FULANO', 'CONSUMIDOR: ...', 'NOME: ...'."""
    for pattern in LABELED_NAME_PATTERNS:
        match = pattern.search(document.raw)
        if match and len(match.group(1).strip()) > 5:
            return match.group(1).strip()
    return None


def client_name_header_line(max_lines: int = None):
    """Fábrica: linha sem dígitos em MAIÚSCULAS ou Nome Próprio no topo."""
    limit = max_lines if max_lines is not None else settings.HEADER_SCAN_LINES

    def client_name_header_line(document: DocumentText) -> Optional[str]:
        for line in document.head(limit):
            if len(line) <= 10 or has_digit(line) or _looks_like_header(line):
                continue
            if ALL_CAPS_LINE_RE.match(line) or PROPER_CASE_LINE_RE.match(line):
                return line
        return None

    return client_name_header_line


def client_name_before_address(document: DocumentText) -> Optional[str]:
    """O nome costuma vir na linha imediatamente acima do endereço."""
    lines = document.lines
    for i, line in enumerate(lines):
        if ADDRESS_LINE_RE.search(line):
            if i > 0:
                candidate = lines[i - 1]
                if len(candidate) > 5 and not has_digit(candidate):
                    return candidate
            return None
    return None


def client_name_before_tax_id(document: DocumentText) -> Optional[str]:
    """Até 3 linhas acima do primeiro rótulo CPF/CNPJ."""
    lines = document.lines
    for i, line in enumerate(lines):
        if TAX_ID_LABEL_RE.search(line):
            for j in range(i - 1, max(0, i - 3) - 1, -1):
                candidate = lines[j]
                if len(candidate) > 10 and not has_digit(candidate):
                    return candidate
            return None
    return None


def client_name_cascade(header_lines: int = None) -> FieldCascade:
    return FieldCascade(
        "client_name",
        [
            client_name_labeled,
            client_name_header_line(header_lines),
            client_name_before_address,
            client_name_before_tax_id,
        ],
        default="",
    )
