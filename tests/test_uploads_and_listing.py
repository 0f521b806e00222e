import pytest

from src.operations_hub.operations_hub.attachments.model import attachment_type_for, format_size_mb
from src.operations_hub.operations_hub.attachments.store import UnconfiguredAssetStore, build_asset_store
from src.operations_hub.operations_hub.attachments.uploader import (
    AttachmentUploader,
    UploadedFile,
    check_uploads,
    is_allowed_upload,
)
from src.operations_hub.operations_hub.common.display_ids import next_display_id
from src.operations_hub.operations_hub.common.listing import ListQuery, Page
from src.operations_hub.operations_hub.core.exceptions import ValidationError
from src.operations_hub.operations_hub.inventory.model import LISTING as INVENTORY_LISTING


@pytest.mark.parametrize(
    "filename, mimetype, allowed",
    [
        ("report.pdf", "application/pdf", True),
        ("Photo.JPG", "image/jpeg", True),
        ("clip.mov", "video/quicktime", False),
        ("notes.txt", "text/plain", False),
        ("script.exe", "application/pdf", False),
    ],
)
def test_upload_allow_list_checks_name_and_mimetype(filename, mimetype, allowed):
    assert is_allowed_upload(filename, mimetype) is allowed


def test_check_uploads_rejects_disallowed_and_oversized_files():
    with pytest.raises(ValidationError, match="Only images, documents, and videos are allowed"):
        check_uploads([UploadedFile("notes.txt", "text/plain", b"x")], max_bytes=10)
    with pytest.raises(ValidationError, match="File too large: big.pdf"):
        check_uploads([UploadedFile("big.pdf", "application/pdf", b"x" * 11)], max_bytes=10)


def test_attachment_type_and_size_formatting():
    assert attachment_type_for("image/png").value == "image"
    assert attachment_type_for("video/mp4").value == "video"
    assert attachment_type_for("application/msword").value == "document"
    assert format_size_mb(1572864) == "1.5 MB"
    assert format_size_mb(0) == "0.0 MB"


def test_unconfigured_store_is_used_without_credentials_and_uploads_are_skipped():
    store = build_asset_store({"cloud_name": "", "api_key": "k", "api_secret": "s"})
    assert isinstance(store, UnconfiguredAssetStore)

    attachments = AttachmentUploader(store).upload_all(
        [UploadedFile("a.pdf", "application/pdf", b"1")], folder="briefing-attachments"
    )
    assert attachments == []


def test_display_id_is_zero_padded_count_plus_one():
    assert next_display_id("BRI", 0) == "BRI001"
    assert next_display_id("TRN", 41) == "TRN042"
    assert next_display_id("BRI", 999) == "BRI1000"


@pytest.mark.parametrize(
    "args, page, limit",
    [
        ({}, 1, 10),
        ({"page": "3", "limit": "25"}, 3, 25),
        ({"page": "0", "limit": "-5"}, 1, 10),
        ({"page": "abc", "limit": "x"}, 1, 10),
        ({"limit": "1000"}, 1, 100),
    ],
)
def test_list_query_paging_arguments(args, page, limit):
    query = ListQuery.from_args(args)
    assert (query.page, query.limit) == (page, limit)
    assert query.skip == (page - 1) * limit


def test_list_query_treats_all_as_no_filter():
    query = ListQuery.from_args({"department": "all", "status": "", "search": "  drill "})
    assert query.department is None
    assert query.status is None
    assert query.search == "drill"


def test_mongo_filter_escapes_search_and_ors_fields():
    filt = INVENTORY_LISTING.mongo_filter(ListQuery(department="tools", search="a+b"))

    assert filt["department"] == "tools"
    assert {"name": {"$regex": r"a\+b", "$options": "i"}} in filt["$or"]
    assert len(filt["$or"]) == len(INVENTORY_LISTING.search_fields)


@pytest.mark.parametrize("total, limit, pages", [(0, 10, 0), (10, 10, 1), (11, 10, 2), (7, 3, 3)])
def test_total_pages_is_ceiling(total, limit, pages):
    assert Page(items=[], total=total, page=1, limit=limit).total_pages == pages
