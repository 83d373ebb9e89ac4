from io import StringIO
from typing import Any, List, Optional, Tuple

import pytest
from rich.console import Console

from vm_disk_export.models import CopyResult, ExportRequest, StorageAccountKey
from vm_disk_export.services.interfaces import AzureSession

# ============================================================================
# In-memory Azure collaborators
# ============================================================================


class CallLog:
    """Ordered record of every collaborator call made during a run."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, tuple]] = []

    def record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def count(self, name: str) -> int:
        return self.names.count(name)

    def args_for(self, name: str) -> tuple:
        for call_name, args in self.calls:
            if call_name == name:
                return args
        raise AssertionError(f"{name} was never called")


class FakeSessionProvider:
    def __init__(self, log: CallLog, error: Optional[Exception] = None) -> None:
        self.log = log
        self.error = error

    def get_session(self) -> AzureSession:
        self.log.record("get_session")
        if self.error:
            raise self.error
        return AzureSession(credential=object(), subscription_id="sub-1234-5678")


class FakeAzureClients:
    """Implements every collaborator protocol against canned values."""

    def __init__(
        self,
        log: CallLog,
        region: str = "eastus",
        os_disk_name: str = "vm1_OsDisk",
        sas_url: str = "https://md-abc.blob.core.windows.net/disk/abcd?sv=2018&sig=secret",
        account_key: str = "fake-account-key==",  # pragma: allowlist secret
        bytes_copied: int = 1024,
    ) -> None:
        self.log = log
        self.region = region
        self.os_disk_name = os_disk_name
        self.sas_url = sas_url
        self.account_key = account_key
        self.bytes_copied = bytes_copied
        self.errors: dict = {}

    def _maybe_fail(self, name: str) -> None:
        if name in self.errors:
            raise self.errors[name]

    def get_region(self, resource_group: str) -> str:
        self.log.record("get_region", resource_group)
        self._maybe_fail("get_region")
        return self.region

    def get_os_disk_name(self, resource_group: str, vm_name: str) -> str:
        self.log.record("get_os_disk_name", resource_group, vm_name)
        self._maybe_fail("get_os_disk_name")
        return self.os_disk_name

    def get_storage_key(
        self, resource_group: str, account_name: str
    ) -> StorageAccountKey:
        self.log.record("get_storage_key", resource_group, account_name)
        self._maybe_fail("get_storage_key")
        return StorageAccountKey(self.account_key)

    def grant_sas(
        self, resource_group: str, disk_name: str, duration_seconds: int
    ) -> str:
        self.log.record("grant_sas", resource_group, disk_name, duration_seconds)
        self._maybe_fail("grant_sas")
        return self.sas_url

    def revoke_sas(self, resource_group: str, disk_name: str) -> None:
        self.log.record("revoke_sas", resource_group, disk_name)
        self._maybe_fail("revoke_sas")

    def copy_blob(
        self,
        source_url: str,
        account_name: str,
        account_key: StorageAccountKey,
        container: str,
        blob_name: str,
    ) -> CopyResult:
        self.log.record(
            "copy_blob", source_url, account_name, account_key, container, blob_name
        )
        self._maybe_fail("copy_blob")
        return CopyResult(
            bytes_copied=self.bytes_copied,
            elapsed_seconds=2.5,
            destination_url=f"https://{account_name}.blob.core.windows.net/{container}/{blob_name}",
            copy_id="copy-1",
        )


class FakeConfirm:
    def __init__(self, log: CallLog, answer: bool) -> None:
        self.log = log
        self.answer = answer
        self.plans: list = []

    def __call__(self, plan) -> bool:
        self.log.record("confirm", plan)
        self.plans.append(plan)
        return self.answer


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def call_log() -> CallLog:
    return CallLog()


@pytest.fixture
def fake_clients(call_log) -> FakeAzureClients:
    return FakeAzureClients(call_log)


@pytest.fixture
def fake_session_provider(call_log) -> FakeSessionProvider:
    return FakeSessionProvider(call_log)


@pytest.fixture
def console_output() -> StringIO:
    return StringIO()


@pytest.fixture
def test_console(console_output) -> Console:
    """Console writing plain text into ``console_output``."""
    return Console(file=console_output, width=200, color_system=None)


@pytest.fixture
def export_request() -> ExportRequest:
    return ExportRequest(
        resource_group="rg1",
        vm_name="vm1",
        storage_account="acct1",
        container="c1",
        destination_file_name="disk.vhd",
        no_confirm=True,
    )


@pytest.fixture
def make_confirm(call_log):
    """Build a confirmation gate that answers ``answer`` and records the plan."""

    def _make(answer: bool) -> FakeConfirm:
        return FakeConfirm(call_log, answer)

    return _make


@pytest.fixture
def make_session_provider(call_log):
    def _make(error: Optional[Exception] = None) -> FakeSessionProvider:
        return FakeSessionProvider(call_log, error=error)

    return _make
