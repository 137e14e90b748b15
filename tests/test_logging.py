from __future__ import annotations

import logging

import structlog

from testcase_ingest.core.logging import record_context, resolve_level


def test_resolve_level_accepts_names_and_numbers() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" WARNING ") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR
    assert resolve_level("chatty") == logging.INFO


def test_record_context_binds_testcase_only_inside_block() -> None:
    with record_context("TC-7", 2, 5):
        bound = structlog.contextvars.get_contextvars()

    assert bound == {"testcase_id": "TC-7", "record": "2/5"}
    assert "testcase_id" not in structlog.contextvars.get_contextvars()
