import io
from pathlib import Path

from storage_gateway.schemas import (
    DetailedFailure,
    OpaqueFailure,
    TargetKind,
    UploadRequest,
    UploadResult,
)
from storage_gateway.services import ContractService, CustomerService, ImageService, OrderService
from tests.consts import TEST_PDF_CONTENT, TEST_PDF_NAME, TEST_PNG_CONTENT, TEST_PNG_NAME


def make_upload(file_name: str, content: bytes, kind: TargetKind) -> UploadRequest:
    return UploadRequest(
        file_name=file_name,
        stream=io.BytesIO(content),
        declared_length=len(content),
        target_kind=kind,
    )


async def test_upload_image_returns_locator(local_backends):
    service = ImageService(local_backends.images)

    result = await service.upload_image(make_upload(TEST_PNG_NAME, TEST_PNG_CONTENT, TargetKind.IMAGE))

    assert isinstance(result, UploadResult)
    assert result.success is True
    assert result.message == f"Image {TEST_PNG_NAME} uploaded successfully."
    assert result.url.endswith(f"_{TEST_PNG_NAME}")


async def test_same_image_name_twice_gives_two_locators(local_backends):
    service = ImageService(local_backends.images)

    first = await service.upload_image(make_upload(TEST_PNG_NAME, b"first", TargetKind.IMAGE))
    second = await service.upload_image(make_upload(TEST_PNG_NAME, b"second", TargetKind.IMAGE))

    assert first.url != second.url
    assert sorted(await service.list_images()) == sorted([first.url, second.url])


async def test_upload_image_rejects_before_touching_backend(broken_backends):
    service = ImageService(broken_backends.images)

    result = await service.upload_image(make_upload("notes.txt", b"0123456789", TargetKind.IMAGE))

    assert isinstance(result, DetailedFailure)
    assert "Invalid file type" in result.message


async def test_upload_image_backend_failure_is_detailed(broken_backends):
    service = ImageService(broken_backends.images)

    result = await service.upload_image(make_upload(TEST_PNG_NAME, TEST_PNG_CONTENT, TargetKind.IMAGE))

    assert isinstance(result, DetailedFailure)
    assert result.status_code == 400
    assert result.message.startswith("Error uploading image: ")
    assert "access denied" in result.message


async def test_list_images_on_empty_container(local_backends):
    assert await ImageService(local_backends.images).list_images() == []


async def test_list_images_backend_failure_is_detailed(broken_backends):
    result = await ImageService(broken_backends.images).list_images()

    assert isinstance(result, DetailedFailure)
    assert result.message.startswith("Error retrieving images: ")


async def test_same_contract_name_overwrites(local_backends, local_settings):
    service = ContractService(local_backends.contracts)

    first = await service.upload_contract(make_upload(TEST_PDF_NAME, b"version one", TargetKind.DOCUMENT))
    second = await service.upload_contract(make_upload(TEST_PDF_NAME, b"version two", TargetKind.DOCUMENT))

    assert first.success and second.success
    assert second.url is None
    assert await service.list_contracts() == [TEST_PDF_NAME]
    stored = Path(local_settings.share_root) / "contracts" / TEST_PDF_NAME
    assert stored.read_bytes() == b"version two"


async def test_list_contracts_skips_directories(local_backends, local_settings):
    service = ContractService(local_backends.contracts)
    await service.upload_contract(make_upload(TEST_PDF_NAME, TEST_PDF_CONTENT, TargetKind.DOCUMENT))
    (Path(local_settings.share_root) / "contracts" / "archive").mkdir()

    assert await service.list_contracts() == [TEST_PDF_NAME]


async def test_upload_contract_backend_failure_is_detailed(broken_backends):
    service = ContractService(broken_backends.contracts)

    result = await service.upload_contract(make_upload(TEST_PDF_NAME, TEST_PDF_CONTENT, TargetKind.DOCUMENT))

    assert isinstance(result, DetailedFailure)
    assert result.message.startswith("Error uploading contract: ")


async def test_empty_queue_message_never_reaches_backend(recording_queue):
    service = OrderService(recording_queue)

    for message in (None, ""):
        result = await service.send_order_message(message)
        assert isinstance(result, DetailedFailure)

    assert recording_queue.calls == []


async def test_queue_message_is_sent_verbatim(recording_queue):
    service = OrderService(recording_queue)
    message = '{"orderId": 42, "note": "  spaces kept  "}'

    result = await service.send_order_message(message)

    assert result == UploadResult(success=True, message=f"Queue message sent: {message}")
    assert recording_queue.calls == ["create_if_not_exists", "send_message"]
    assert recording_queue.messages == [message]


async def test_queue_backend_failure_is_opaque(broken_backends):
    result = await OrderService(broken_backends.orders).send_order_message("order 42 shipped")
    assert result == OpaqueFailure()


async def test_add_customer_twice_creates_two_records(local_backends):
    service = CustomerService(local_backends.customers)

    for _ in range(2):
        result = await service.add_customer("Jane Doe", "jane@example.com", "0825550100")
        assert result.message == "Customer Jane Doe added successfully."

    customers = await service.list_customers()
    assert len(customers) == 2
    assert customers[0]["rowKey"] != customers[1]["rowKey"]
    assert {c["partitionKey"] for c in customers} == {"customers"}
    assert {c["email"] for c in customers} == {"jane@example.com"}


async def test_add_customer_with_missing_field_is_opaque(broken_backends):
    # The broken table would log a different error if it were reached
    result = await CustomerService(broken_backends.customers).add_customer("Jane Doe", None, "0825550100")
    assert isinstance(result, OpaqueFailure)
    assert result.status_code == 500


async def test_customer_backend_failures_are_opaque(broken_backends):
    service = CustomerService(broken_backends.customers)

    assert isinstance(await service.add_customer("Jane", "jane@example.com", "1"), OpaqueFailure)
    assert isinstance(await service.list_customers(), OpaqueFailure)


async def test_list_customers_with_incomplete_record_is_opaque(local_backends):
    table = local_backends.customers
    await table.create_if_not_exists()
    await table.add_entity({"PartitionKey": "customers", "RowKey": "x", "Name": "Only name"})

    result = await CustomerService(table).list_customers()

    assert isinstance(result, OpaqueFailure)
