from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from googleapiclient.errors import HttpError

from networking_sync.errors import FetchError, WriteError
from networking_sync.models.config_models import CredentialsConfig, SheetLocation, column_letter
from networking_sync.sheets.client import SCOPES, SheetsClient, build_credentials

LOCATION = SheetLocation("sheet-id", "Dashboard")


def _http_error(status: int = 403) -> HttpError:
    resp = MagicMock(status=status, reason="Forbidden")
    return HttpError(resp, b'{"error": {"message": "forbidden"}}')


def _service(get_result=None, append_result=None, get_error=None, append_error=None) -> MagicMock:
    service = MagicMock()
    values = service.spreadsheets.return_value.values.return_value
    if get_error is not None:
        values.get.return_value.execute.side_effect = get_error
    else:
        values.get.return_value.execute.return_value = get_result or {}
    if append_error is not None:
        values.append.return_value.execute.side_effect = append_error
    else:
        values.append.return_value.execute.return_value = append_result or {}
    return service


def test_fetch_rows_returns_string_rows():
    service = _service(get_result={"values": [["Email", "Name"], ["a@x.com", 3]]})
    rows = SheetsClient(service).fetch_rows(LOCATION)
    assert rows == [["Email", "Name"], ["a@x.com", "3"]]
    values = service.spreadsheets.return_value.values.return_value
    values.get.assert_called_once_with(spreadsheetId="sheet-id", range="'Dashboard'!A:Z")


def test_fetch_rows_empty_sheet():
    assert SheetsClient(_service(get_result={})).fetch_rows(LOCATION) == []


def test_fetch_rows_wraps_http_error():
    client = SheetsClient(_service(get_error=_http_error()))
    with pytest.raises(FetchError) as e:
        client.fetch_rows(LOCATION)
    assert e.value.spreadsheet == "sheet-id"
    assert e.value.sheet == "Dashboard"


def test_append_rows_uses_raw_insert_rows():
    service = _service(append_result={"updates": {"updatedRows": 2}})
    written = SheetsClient(service).append_rows(LOCATION, [["a", "b", "c"], ["d", "e", "f"]])
    assert written == 2
    values = service.spreadsheets.return_value.values.return_value
    values.append.assert_called_once_with(
        spreadsheetId="sheet-id",
        range="'Dashboard'!A:C",
        valueInputOption="RAW",
        insertDataOption="INSERT_ROWS",
        body={"values": [["a", "b", "c"], ["d", "e", "f"]]},
    )


def test_append_rows_nothing_to_write():
    service = _service()
    assert SheetsClient(service).append_rows(LOCATION, []) == 0
    service.spreadsheets.assert_not_called()


def test_append_rows_wraps_http_error():
    client = SheetsClient(_service(append_error=_http_error(500)))
    with pytest.raises(WriteError):
        client.append_rows(LOCATION, [["a"]])


def test_columns_range_past_z():
    assert SheetLocation("id").columns_range(28) == "A:AB"
    assert column_letter(1) == "A"
    assert column_letter(26) == "Z"
    assert column_letter(27) == "AA"
    assert column_letter(702) == "ZZ"


def test_build_credentials_from_file():
    with patch("networking_sync.sheets.client.Credentials") as creds:
        build_credentials(CredentialsConfig(service_account_file="key.json"))
    creds.from_service_account_file.assert_called_once_with("key.json", scopes=SCOPES)


def test_build_credentials_from_fields_unescapes_private_key():
    cfg = CredentialsConfig(client_email="svc@p.iam", private_key="-----BEGIN-----\\nabc\\n-----END-----")
    with patch("networking_sync.sheets.client.Credentials") as creds:
        build_credentials(cfg)
    info = creds.from_service_account_info.call_args.args[0]
    assert info["private_key"] == "-----BEGIN-----\nabc\n-----END-----"
    assert info["client_email"] == "svc@p.iam"


def test_from_config_without_credentials_raises_fetch_error():
    with pytest.raises(FetchError, match="authentication failed"):
        SheetsClient.from_config(CredentialsConfig())


def test_from_config_missing_key_file_raises_fetch_error(tmp_path):
    with pytest.raises(FetchError):
        SheetsClient.from_config(CredentialsConfig(service_account_file=str(tmp_path / "missing.json")))
