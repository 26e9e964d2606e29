import pytest

from storage_gateway.schemas import TargetKind
from storage_gateway.services.validation import (
    EMPTY_UPLOAD_MESSAGE,
    file_extension,
    validate_upload,
)
from tests.consts import MiB


@pytest.mark.parametrize("file_name", ["notes.txt", "archive.zip", "shoe", "shoe.png.exe"])
def test_image_with_disallowed_extension_is_rejected(file_name):
    outcome = validate_upload(TargetKind.IMAGE, file_name, 10)
    assert not outcome.ok
    assert "Invalid file type" in outcome.reason


@pytest.mark.parametrize("file_name", ["a.jpg", "a.jpeg", "a.png", "a.gif", "a.bmp", "a.webp", "PHOTO.JPG", "Mixed.WebP"])
def test_image_extensions_are_case_insensitive(file_name):
    assert validate_upload(TargetKind.IMAGE, file_name, 10).ok


def test_renamed_file_passes_on_suffix_alone():
    # No content sniffing: only the name is checked
    assert validate_upload(TargetKind.IMAGE, "report.pdf.png", 10).ok


def test_image_size_boundary():
    assert validate_upload(TargetKind.IMAGE, "big.png", 10 * MiB).ok

    outcome = validate_upload(TargetKind.IMAGE, "big.png", 10 * MiB + 1)
    assert not outcome.ok
    assert outcome.reason == "File size must be less than 10MB."


def test_document_size_boundary():
    assert validate_upload(TargetKind.DOCUMENT, "contract.pdf", 100 * MiB).ok

    outcome = validate_upload(TargetKind.DOCUMENT, "contract.pdf", 100 * MiB + 1)
    assert not outcome.ok
    assert outcome.reason == "File size must be less than 100MB."


def test_document_rejects_images():
    outcome = validate_upload(TargetKind.DOCUMENT, "scan.png", 10)
    assert not outcome.ok
    assert outcome.reason.startswith("Invalid file type. Please upload PDF")


@pytest.mark.parametrize("file_name, length", [("", 10), (None, None), ("shoe.png", 0), ("shoe.png", None)])
def test_missing_or_empty_file_is_its_own_failure(file_name, length):
    outcome = validate_upload(TargetKind.IMAGE, file_name, length)
    assert not outcome.ok
    assert outcome.reason == EMPTY_UPLOAD_MESSAGE


def test_empty_check_runs_before_extension_check():
    outcome = validate_upload(TargetKind.IMAGE, "notes.txt", 0)
    assert outcome.reason == EMPTY_UPLOAD_MESSAGE


def test_file_extension():
    assert file_extension("a/b/c.DOCX") == "docx"
    assert file_extension("C:\\Users\\me\\deck.pptx") == "pptx"
    assert file_extension("README") == ""


def test_leading_dot_name_uses_the_text_after_the_dot():
    assert file_extension(".png") == "png"
    assert validate_upload(TargetKind.IMAGE, ".png", 10).ok


@pytest.mark.parametrize("file_name", ["shoe.", "dir.png/shoe"])
def test_names_without_a_final_extension(file_name):
    assert file_extension(file_name) == ""
