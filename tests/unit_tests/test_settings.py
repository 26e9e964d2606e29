import pytest
from pydantic import ValidationError

from storage_gateway.config.settings import MOCK_ENDPOINT_URL, ConnectionInfo, Settings

PRIMARY = "EndpointUrl=http://primary:4566;Region=eu-west-1;AccessKeyId=p;SecretAccessKey=ps"
QUEUE = "EndpointUrl=http://queue:4566;AccessKeyId=q;SecretAccessKey=qs"
TABLE = "EndpointUrl=http://table:4566;AccessKeyId=t;SecretAccessKey=ts"
RUNTIME = "EndpointUrl=http://runtime:4566;AccessKeyId=r;SecretAccessKey=rs"


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in (
        "DEPLOYMENT_MODE",
        "STORAGE_CONNECTION_STRING",
        "QUEUE_CONNECTION_STRING",
        "TABLE_CONNECTION_STRING",
        "RUNTIME_STORAGE_CONNECTION_STRING",
        "AWS_ENDPOINT_URL",
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_DEFAULT_REGION",
    ):
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)


def test_parse_connection_string():
    info = ConnectionInfo.parse(PRIMARY)

    assert info.endpoint_url == "http://primary:4566"
    assert info.region == "eu-west-1"
    assert info.client_kwargs() == {
        "endpoint_url": "http://primary:4566",
        "region_name": "eu-west-1",
        "aws_access_key_id": "p",
        "aws_secret_access_key": "ps",
    }


def test_parse_connection_string_keys_are_case_insensitive():
    info = ConnectionInfo.parse("endpointurl=http://x:1; region = us-west-2 ;")
    assert info.endpoint_url == "http://x:1"
    assert info.region == "us-west-2"
    assert info.access_key_id is None


@pytest.mark.parametrize("connection_string", ["EndpointUrl", "AccountName=devstore;AccountKey=abc"])
def test_parse_rejects_malformed_connection_strings(connection_string):
    with pytest.raises(ValueError):
        ConnectionInfo.parse(connection_string)


def test_primary_connection_string_wins_everywhere(clean_env, monkeypatch):
    monkeypatch.setenv("STORAGE_CONNECTION_STRING", PRIMARY)
    monkeypatch.setenv("QUEUE_CONNECTION_STRING", QUEUE)
    monkeypatch.setenv("TABLE_CONNECTION_STRING", TABLE)
    monkeypatch.setenv("RUNTIME_STORAGE_CONNECTION_STRING", RUNTIME)

    settings = Settings()

    for capability in ("object_store", "queue", "table"):
        assert settings.connection_for(capability).endpoint_url == "http://primary:4566"


def test_capability_specific_fallbacks(clean_env, monkeypatch):
    monkeypatch.setenv("QUEUE_CONNECTION_STRING", QUEUE)
    monkeypatch.setenv("TABLE_CONNECTION_STRING", TABLE)
    monkeypatch.setenv("RUNTIME_STORAGE_CONNECTION_STRING", RUNTIME)

    settings = Settings()

    assert settings.connection_for("queue").endpoint_url == "http://queue:4566"
    assert settings.connection_for("table").endpoint_url == "http://table:4566"
    assert settings.connection_for("object_store").endpoint_url == "http://runtime:4566"


def test_queue_connection_string_stays_with_the_queue(clean_env, monkeypatch):
    monkeypatch.setenv("QUEUE_CONNECTION_STRING", QUEUE)
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "key")

    settings = Settings()

    assert settings.connection_for("queue").endpoint_url == "http://queue:4566"
    for capability in ("table", "object_store"):
        info = settings.connection_for(capability)
        assert info.endpoint_url is None
        assert info.access_key_id == "key"


def test_queue_and_table_connection_strings_do_not_mix(clean_env, monkeypatch):
    monkeypatch.setenv("QUEUE_CONNECTION_STRING", QUEUE)
    monkeypatch.setenv("TABLE_CONNECTION_STRING", TABLE)

    settings = Settings()

    assert settings.connection_for("queue").endpoint_url == "http://queue:4566"
    assert settings.connection_for("table").endpoint_url == "http://table:4566"
    assert settings.connection_for("object_store").endpoint_url is None


def test_unknown_capability_is_rejected(clean_env):
    with pytest.raises(ValueError):
        Settings().connection_for("file_share")


def test_runtime_connection_string_is_the_last_resort(clean_env, monkeypatch):
    monkeypatch.setenv("RUNTIME_STORAGE_CONNECTION_STRING", RUNTIME)

    settings = Settings()

    assert settings.connection_for("queue").access_key_id == "r"
    assert settings.connection_for("table").access_key_id == "r"


def test_connection_string_without_region_takes_the_default(clean_env, monkeypatch):
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-southeast-1")
    monkeypatch.setenv("QUEUE_CONNECTION_STRING", QUEUE)

    assert Settings().connection_for("queue").region == "ap-southeast-1"


def test_aws_settings_used_without_connection_strings(clean_env, monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")

    info = Settings().connection_for("object_store")

    assert info.endpoint_url is None
    assert info.region == "us-east-1"
    assert info.access_key_id == "key"


def test_invalid_connection_string_fails_at_startup(clean_env, monkeypatch):
    monkeypatch.setenv("STORAGE_CONNECTION_STRING", "DefaultEndpointsProtocol=https")

    with pytest.raises(ValidationError):
        Settings()


def test_aws_mock_defaults(clean_env):
    settings = Settings(deployment_mode="aws-mock")

    info = settings.connection_for("table")
    assert info.endpoint_url == MOCK_ENDPOINT_URL
    assert info.access_key_id == "mock"
    assert info.secret_access_key == "mock"


@pytest.mark.parametrize(
    "given, expected",
    [("local", "local-dev"), ("local-mock", "local-dev"), ("cloud", "aws-prod"), ("aws-mock", "aws-mock")],
)
def test_deployment_mode_aliases(clean_env, given, expected):
    assert Settings(deployment_mode=given).deployment_mode == expected


def test_unknown_deployment_mode_is_rejected(clean_env):
    with pytest.raises(ValidationError):
        Settings(deployment_mode="azure")


def test_share_root_defaults_to_storage_dir(clean_env):
    assert Settings(storage_dir="/data").share_root == "/data"
    assert Settings(storage_dir="/data", file_share_root="/mnt/efs").share_root == "/mnt/efs"


def test_environment_dict_masks_secrets(clean_env, monkeypatch):
    monkeypatch.setenv("STORAGE_CONNECTION_STRING", PRIMARY)
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")

    env = Settings().get_environment_dict()

    assert env["STORAGE_CONNECTION_STRING"] == "***"
    assert env["AWS_SECRET_ACCESS_KEY"] == "***"
    assert "ps" not in env.values()
