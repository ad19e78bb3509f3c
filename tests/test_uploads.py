import os

import pytest

from services.dataset_parser import parse_csv
from services.errors import ParseError


def _leftovers(settings):
    if not os.path.isdir(settings.upload_dir):
        return []
    return os.listdir(settings.upload_dir)


# ---- /transcribe -------------------------------------------------------------

def test_transcribe_without_audio_is_400(client, analyzer, settings):
    resp = client.post("/transcribe", data={"note": "no file here"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "No audio file uploaded"}
    assert analyzer.calls == []
    assert _leftovers(settings) == []


def test_transcribe_returns_provider_body(client, analyzer, settings):
    resp = client.post("/transcribe", files={"audio": ("clip.wav", b"RIFF....WAVEfmt ", "audio/wav")})

    assert resp.status_code == 200
    assert resp.json()["results"][0]["alternatives"][0]["transcript"] == "hello world"
    assert analyzer.calls == [("transcribe", "audio/wav", b"RIFF....WAVEfmt ")]
    assert _leftovers(settings) == []


def test_transcribe_failure_cleans_up(client, analyzer, settings):
    analyzer.transcribe_error = {"code": 415, "error": "Unsupported media type"}

    resp = client.post("/transcribe", files={"audio": ("clip.xyz", b"\x00\x01", "application/x-weird")})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to transcribe audio"}
    assert _leftovers(settings) == []


# ---- /api/uploadDataset ------------------------------------------------------

def test_upload_dataset_returns_rows(client, settings):
    csv_bytes = b"A,B,C\n1,2,3\nx,y,z\n"

    resp = client.post("/api/uploadDataset", files={"dataset": ("data.csv", csv_bytes, "text/csv")})

    assert resp.status_code == 200
    assert resp.json() == {"data": [{"A": "1", "B": "2", "C": "3"}, {"A": "x", "B": "y", "C": "z"}]}
    assert _leftovers(settings) == []


def test_upload_dataset_parse_error_cleans_up(client, settings):
    csv_bytes = b"A,B,C\n1,2,3\n4,5\n"

    resp = client.post("/api/uploadDataset", files={"dataset": ("data.csv", csv_bytes, "text/csv")})

    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Error parsing CSV file."
    assert body["details"]["row"] == 3
    assert body["details"]["expected"] == 3
    assert body["details"]["got"] == 2
    assert _leftovers(settings) == []


def test_upload_dataset_non_utf8_is_500(client, settings):
    resp = client.post("/api/uploadDataset", files={"dataset": ("data.csv", b"A,B\n\xff\xfe,1\n", "text/csv")})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to process dataset file"}
    assert _leftovers(settings) == []


def test_upload_dataset_without_file_is_400(client, settings):
    resp = client.post("/api/uploadDataset", data={})

    assert resp.status_code == 400
    assert resp.json() == {"error": "No dataset file uploaded."}
    assert _leftovers(settings) == []


# ---- parser ------------------------------------------------------------------

def test_parse_csv_keeps_strings_and_skips_blank_lines():
    rows = parse_csv('Name,Age,Sentiment\n"Doe, Jane",041,"said ""hi"""\n\nBob,7,ok\n')

    assert rows == [
        {"Name": "Doe, Jane", "Age": "041", "Sentiment": 'said "hi"'},
        {"Name": "Bob", "Age": "7", "Sentiment": "ok"},
    ]


def test_parse_csv_header_only():
    assert parse_csv("A,B,C\n") == []


def test_parse_csv_too_many_fields():
    with pytest.raises(ParseError) as exc:
        parse_csv("A,B\n1,2\n3,4,5\n")

    assert exc.value.details["row"] == 3
    assert exc.value.details["got"] == 3


def test_parse_csv_empty_input():
    with pytest.raises(ParseError):
        parse_csv("")
