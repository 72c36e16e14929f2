"""Tests for the console log formatter."""

import logging

from hostpin.utils.console import ColorfulFormatter


def _record(name: str, msg: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


def test_plain_format_strips_package_prefix() -> None:
    """Component names are shown without the hostpin prefix."""
    formatter = ColorfulFormatter(use_colors=False)
    line = formatter.format(_record("hostpin.services.engine", "hello"))

    assert "services.engine" in line
    assert "hostpin.services" not in line
    assert line.endswith("| hello")
    assert "\033[" not in line


def test_colored_format_highlights_fingerprints() -> None:
    """Fingerprints are highlighted when colors are on."""
    formatter = ColorfulFormatter(use_colors=True)
    line = formatter.format(_record("hostpin.known_hosts.store", "key SHA256:abc+/12"))

    assert "\033[93mSHA256:abc+/12\033[0m" in line
