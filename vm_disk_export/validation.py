"""Input validation for export parameters.

All checks here run before any network call is made.
"""

from typing import Any

from .exceptions import InvalidDestinationError, InvalidParameterError

VHD_SUFFIX = ".vhd"


def validate_destination_file_name(file_name: str) -> str:
    """Validate the destination blob name.

    Args:
        file_name: Destination file name

    Returns:
        The file name, unchanged

    Raises:
        InvalidDestinationError: If the name does not end in ``.vhd``
            (matched case-insensitively)
    """
    if not file_name or not file_name.strip():
        raise InvalidDestinationError(
            "Destination file name cannot be empty", file_name=file_name
        )
    if not file_name.lower().endswith(VHD_SUFFIX):
        raise InvalidDestinationError(
            f"Destination file name must end with '{VHD_SUFFIX}': {file_name}",
            file_name=file_name,
        )
    return file_name


def validate_identifier(label: str, value: str) -> str:
    """Validate that an Azure resource identifier is non-empty.

    Args:
        label: Human-readable parameter name used in the error message
        value: The identifier

    Returns:
        Validated identifier (stripped of whitespace)

    Raises:
        InvalidParameterError: If the identifier is empty
    """
    if not value or not value.strip():
        raise InvalidParameterError(f"The {label} cannot be empty", parameter=label)
    return value.strip()


def validate_sas_expiry(seconds: Any) -> int:
    """Validate the SAS expiry duration in seconds.

    Raises:
        InvalidParameterError: If the value is not a positive integer
    """
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise InvalidParameterError(
            f"SAS expiry duration must be an integer number of seconds: {seconds!r}",
            parameter="sas_expiry_seconds",
        )
    if seconds <= 0:
        raise InvalidParameterError(
            f"SAS expiry duration must be positive: {seconds}",
            parameter="sas_expiry_seconds",
        )
    return seconds
