"""Upload validation policy, one rule set per target kind."""

from dataclasses import dataclass
from typing import FrozenSet, Optional

from storage_gateway.schemas import TargetKind

MiB = 1024 * 1024

EMPTY_UPLOAD_MESSAGE = "No file uploaded or file is empty."


@dataclass(frozen=True)
class ValidationPolicy:
    allowed_extensions: FrozenSet[str]
    max_bytes: int
    type_message: str
    size_message: str

    def allows_extension(self, file_name: str) -> bool:
        return file_extension(file_name) in self.allowed_extensions


@dataclass(frozen=True)
class ValidationOutcome:
    ok: bool
    reason: Optional[str] = None


IMAGE_POLICY = ValidationPolicy(
    allowed_extensions=frozenset({"jpg", "jpeg", "png", "gif", "bmp", "webp"}),
    max_bytes=10 * MiB,
    type_message="Invalid file type. Please upload JPG, PNG, GIF, BMP, or WebP images.",
    size_message="File size must be less than 10MB.",
)

DOCUMENT_POLICY = ValidationPolicy(
    allowed_extensions=frozenset({"pdf", "doc", "docx", "txt", "xlsx", "xls", "ppt", "pptx"}),
    max_bytes=100 * MiB,
    type_message="Invalid file type. Please upload PDF, Word, Excel, PowerPoint, or Text files.",
    size_message="File size must be less than 100MB.",
)

POLICIES = {
    TargetKind.IMAGE: IMAGE_POLICY,
    TargetKind.DOCUMENT: DOCUMENT_POLICY,
}


def file_extension(file_name: str) -> str:
    """Lower-cased text after the last dot of the base name, or '' when there is none.

    A leading dot counts, so ``.png`` has the extension ``png``.
    """
    base_name = file_name.replace("\\", "/").rsplit("/", 1)[-1]
    _, dot, extension = base_name.rpartition(".")
    return extension.lower() if dot else ""


def validate_upload(kind: TargetKind, file_name: Optional[str], length: Optional[int]) -> ValidationOutcome:
    """
    Check a candidate upload against the policy for ``kind``.

    Only the file name suffix is inspected, never the content. The size check
    is strict, so a file of exactly ``max_bytes`` passes.

    :param kind: The target kind selecting the policy.
    :param file_name: Original file name from the form, or None when no file was sent.
    :param length: Byte length of the payload, or None when no file was sent.
    :return: The outcome; failures carry a human-readable reason.
    """
    if not file_name or not length:
        return ValidationOutcome(ok=False, reason=EMPTY_UPLOAD_MESSAGE)

    policy = POLICIES[kind]
    if not policy.allows_extension(file_name):
        return ValidationOutcome(ok=False, reason=policy.type_message)

    if length > policy.max_bytes:
        return ValidationOutcome(ok=False, reason=policy.size_message)

    return ValidationOutcome(ok=True)
