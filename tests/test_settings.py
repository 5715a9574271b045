"""
Testes da configuração (diretório de logs).
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import importlib

from config import settings


def test_diretorio_de_logs_relativo_ao_cwd(tmp_path, monkeypatch):
    monkeypatch.delenv("LOG_DIR", raising=False)
    monkeypatch.setenv("LOG_TO_FILE", "1")
    monkeypatch.chdir(tmp_path)

    reloaded = importlib.reload(settings)
    try:
        assert not reloaded.LOG_DIR.is_absolute()
        assert reloaded.LOG_DIR.resolve() == (tmp_path / "logs").resolve()
        assert (tmp_path / "logs").is_dir()
    finally:
        reloaded.rotating_handler.close()


def test_log_dir_configuravel(tmp_path, monkeypatch):
    target = tmp_path / "custom"
    monkeypatch.setenv("LOG_DIR", str(target))
    monkeypatch.setenv("LOG_TO_FILE", "0")

    reloaded = importlib.reload(settings)

    assert reloaded.LOG_DIR == target
    assert reloaded.LOG_FILE == target / "bill_extractor.log"
    assert not target.exists()
