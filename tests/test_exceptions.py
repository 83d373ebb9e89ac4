"""
Tests for the exception hierarchy.
"""

from vm_disk_export.exceptions import (
    AzureAuthenticationError,
    AzureError,
    BlobCopyError,
    DiskAccessRevokeError,
    InvalidDestinationError,
    ValidationError,
    VmDiskExportError,
    wrap_azure_exception,
)


class TestVmDiskExportError:
    def test_str_includes_code_context_and_suggestion(self):
        error = VmDiskExportError(
            "Something failed",
            error_code="E1",
            context={"disk": "vm1_OsDisk"},
            recovery_suggestion="Try again",
        )

        rendered = str(error)
        assert rendered.startswith("[E1] Something failed")
        assert "disk=vm1_OsDisk" in rendered
        assert "(suggestion: Try again)" in rendered

    def test_to_dict(self):
        cause = RuntimeError("boom")
        error = BlobCopyError(
            "Copy failed", container="c1", blob_name="disk.vhd", cause=cause
        )

        data = error.to_dict()
        assert data["error_type"] == "BlobCopyError"
        assert data["error_code"] == "BLOB_COPY_FAILED"
        assert data["context"] == {"container": "c1", "blob_name": "disk.vhd"}
        assert data["cause"] == "boom"


class TestHierarchy:
    def test_validation_errors(self):
        error = InvalidDestinationError("bad", file_name="disk.vmdk")
        assert isinstance(error, ValidationError)
        assert isinstance(error, VmDiskExportError)
        assert "Use a destination file name ending in .vhd" in str(error)

    def test_revoke_error_suggests_manual_revoke(self):
        error = DiskAccessRevokeError("revoke failed", disk_name="vm1_OsDisk")
        assert isinstance(error, AzureError)
        assert "az disk revoke-access" in error.recovery_suggestion


class TestWrapAzureException:
    def test_authentication_message(self):
        wrapped = wrap_azure_exception(Exception("Unauthorized request"))
        assert isinstance(wrapped, AzureAuthenticationError)

    def test_generic_message(self):
        original = Exception("Throttled")
        wrapped = wrap_azure_exception(original, context={"operation": "list"})

        assert type(wrapped) is AzureError
        assert wrapped.cause is original
        assert wrapped.context == {"operation": "list"}
