"""Tests for keeping secrets out of log output."""

import logging

import pytest

from vm_disk_export.utils import redact_sas_url, suppress_secret_logging


class TestSuppressSecretLogging:
    def test_raises_and_restores_levels(self):
        target = logging.getLogger("vm_disk_export.tests.http")
        target.setLevel(logging.DEBUG)

        with suppress_secret_logging(["vm_disk_export.tests.http"]):
            assert target.level == logging.WARNING

        assert target.level == logging.DEBUG

    def test_restores_levels_on_error(self):
        target = logging.getLogger("vm_disk_export.tests.http_error")
        target.setLevel(logging.INFO)

        with pytest.raises(RuntimeError):
            with suppress_secret_logging(["vm_disk_export.tests.http_error"]):
                raise RuntimeError("copy failed")

        assert target.level == logging.INFO

    def test_leaves_quieter_loggers_alone(self):
        target = logging.getLogger("vm_disk_export.tests.quiet")
        target.setLevel(logging.ERROR)

        with suppress_secret_logging(["vm_disk_export.tests.quiet"]):
            assert target.level == logging.ERROR

    def test_debug_records_are_dropped(self, caplog):
        name = "vm_disk_export.tests.body"
        logging.getLogger(name).setLevel(logging.DEBUG)

        with caplog.at_level(logging.DEBUG, logger=name):
            with suppress_secret_logging([name]):
                logging.getLogger(name).debug("AccountKey=fake-key==")

        assert "fake-key" not in caplog.text


class TestRedactSasUrl:
    def test_query_is_redacted(self):
        url = "https://md-abc.blob.core.windows.net/disk/abcd?sv=2018-03-28&sig=secret"

        redacted = redact_sas_url(url)

        assert redacted == "https://md-abc.blob.core.windows.net/disk/abcd?***REDACTED***"

    def test_url_without_query_is_unchanged(self):
        url = "https://acct1.blob.core.windows.net/c1/disk.vhd"
        assert redact_sas_url(url) == url
