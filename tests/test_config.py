from __future__ import annotations

import logging

from bg_remover.config import resolve_log_level


def test_resolve_log_level_known_names() -> None:
    assert resolve_log_level('debug') == logging.DEBUG
    assert resolve_log_level(' WARNING ') == logging.WARNING


def test_resolve_log_level_falls_back_to_info() -> None:
    assert resolve_log_level('LOUD') == logging.INFO
    assert resolve_log_level('') == logging.INFO
    assert resolve_log_level(None) == logging.INFO
