import os
import logging
import platform
from logging.handlers import RotatingFileHandler
from pathlib import Path
from dotenv import load_dotenv

# Carrega as variáveis do arquivo .env para o ambiente
load_dotenv()

# --- Caminhos de Binários Externos ---
# Centralizamos aqui para não espalhar caminhos pelo código
# Detecta automaticamente se está no Docker (Linux) ou Windows
is_linux = platform.system() == 'Linux'

# Defaults diferentes para Linux (Docker) e Windows (desenvolvimento)
if is_linux:
    TESSERACT_CMD = os.getenv('TESSERACT_CMD', '/usr/bin/tesseract')
    POPPLER_PATH = os.getenv('POPPLER_PATH', '/usr/bin')
else:
    TESSERACT_CMD = os.getenv('TESSERACT_CMD', r'C:\Program Files\Tesseract-OCR\tesseract.exe')
    POPPLER_PATH = os.getenv('POPPLER_PATH', r'C:\Poppler\Library\bin')

# --- Parâmetros do OCR ---
# --psm 6: Assume um bloco único de texto uniforme
OCR_CONFIG = r'--psm 6'
OCR_LANG = 'por'

# Abaixo disso a leitura nativa é considerada falha (PDF escaneado)
MIN_TEXT_LENGTH = int(os.getenv('MIN_TEXT_LENGTH', '50'))

# --- Heurísticas de extração ---
# Quantas linhas do topo são varridas pelas estratégias "perto do cabeçalho"
HEADER_SCAN_LINES = int(os.getenv('HEADER_SCAN_LINES', '20'))
INSTALLATION_SCAN_LINES = int(os.getenv('INSTALLATION_SCAN_LINES', '30'))

# Prefixos típicos de número de instalação da distribuidora
INSTALLATION_PREFIXES = tuple(
    p.strip() for p in os.getenv('INSTALLATION_PREFIXES', '3001,7204,7202').split(',') if p.strip()
)

# --- Estimativas do motor de reparo (aproximações, não medições) ---
# kWh ≈ total / KWH_PRICE_ESTIMATE
KWH_PRICE_ESTIMATE = float(os.getenv('KWH_PRICE_ESTIMATE', '1.5'))
# Energia elétrica ≈ 70% do total
ELECTRIC_VALUE_SHARE = float(os.getenv('ELECTRIC_VALUE_SHARE', '0.7'))
# Iluminação pública geralmente fica entre 8-15% do total
PUBLIC_LIGHTING_SHARE = float(os.getenv('PUBLIC_LIGHTING_SHARE', '0.1'))

# Tabela de correções por entidade conhecida (JSON). Vazio = tabela padrão.
ENTITY_FIXUPS_FILE = os.getenv('ENTITY_FIXUPS_FILE', '')

# --- Configuração de Logging com Rotação ---
# RotatingFileHandler evita crescimento descontrolado de logs
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
# Relativo ao diretório de trabalho atual
LOG_DIR = Path(os.getenv('LOG_DIR', 'logs'))
LOG_FILE = LOG_DIR / "bill_extractor.log"
LOG_TO_FILE = os.getenv('LOG_TO_FILE', '1') == '1'

# Os módulos usam logging.getLogger(__name__); os handlers ficam nos pacotes
PROJECT_LOGGERS = ('config', 'core', 'extractors', 'strategies')

# Formato detalhado para auditoria
log_formatter = logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

handlers = []
if LOG_TO_FILE:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    # Handler com rotação: 10MB por arquivo, mantém 5 backups
    rotating_handler = RotatingFileHandler(
        LOG_FILE,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    rotating_handler.setFormatter(log_formatter)
    handlers.append(rotating_handler)

# Também envia para console
console_handler = logging.StreamHandler()
console_handler.setFormatter(log_formatter)
handlers.append(console_handler)

for name in PROJECT_LOGGERS:
    package_logger = logging.getLogger(name)
    package_logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    if not package_logger.handlers:
        for handler in handlers:
            package_logger.addHandler(handler)
