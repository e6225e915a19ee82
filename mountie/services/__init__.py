"""Compliance checks and the API/template helpers they are built from."""

from mountie.services.repository import (
    add_compliance_file_if_required,
    add_license_if_required,
    has_license,
)

__all__ = ["add_compliance_file_if_required", "add_license_if_required", "has_license"]
