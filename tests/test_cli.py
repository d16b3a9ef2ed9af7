"""Tests for the command line interface."""

import hashlib
import json

import httpx
import pytest

from seedauth import SeedAuthClient, derive_key_pair, public_key, verify_signature
import seedauth.cli as cli

SEED = "00" * 32
ZERO_SEED_PUBLIC_KEY = "3b6a27bcceb6a42d62a3a8d02a6f0d73653215771de243a63ac048a18b59da29"


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "seedauth.json"
    path.write_text(
        json.dumps({"api_url": "http://example.test", "api_key": {"id": "key-1", "seed": SEED}}),
        encoding="utf-8",
    )
    return str(path)


def test_keygen(capsys):
    assert cli.main(["keygen"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert list(data) == ["seed", "pub_key"]
    assert public_key(data["seed"]).hex() == data["pub_key"]


def test_pubkey(config_path, capsys):
    assert cli.main(["--config", config_path, "pubkey"]) == 0
    assert capsys.readouterr().out.strip() == ZERO_SEED_PUBLIC_KEY


def test_sign(config_path, tmp_path, capsys):
    blob = tmp_path / "blob.bin"
    blob.write_bytes(b"GET\n/v1/assets\n\nkey-123")

    assert cli.main(["-c", config_path, "sign", str(blob)]) == 0
    signature = capsys.readouterr().out.strip()
    assert verify_signature(ZERO_SEED_PUBLIC_KEY, blob.read_bytes(), signature)


def test_approval(config_path, tmp_path, capsys):
    challenge = tmp_path / "challenge.json"
    challenge.write_text(
        json.dumps({"type": "DSA_ED25519", "challenge": {"attrs": ["amount", "to"]}})
    )
    transaction = tmp_path / "tx.json"
    transaction.write_text(json.dumps({"amount": "10", "to": "acct-1"}))

    assert cli.main(["-c", config_path, "approval", str(challenge), str(transaction)]) == 0
    data = json.loads(capsys.readouterr().out)

    message = b"amount: 10\nto: acct-1"
    assert list(data) == ["type", "challenge", "response"]
    assert data["challenge"]["sha256"] == hashlib.sha256(message).hexdigest()
    assert verify_signature(derive_key_pair(SEED).verifying_key, message, data["response"])


def test_approval_unsupported_type(config_path, tmp_path, capsys):
    challenge = tmp_path / "challenge.json"
    challenge.write_text(json.dumps({"type": "OTHER", "challenge": {"attrs": []}}))
    transaction = tmp_path / "tx.json"
    transaction.write_text("{}")

    assert cli.main(["-c", config_path, "approval", str(challenge), str(transaction)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "UnsupportedApprovalType" in captured.err


def test_approval_missing_attribute(config_path, tmp_path, capsys):
    challenge = tmp_path / "challenge.json"
    challenge.write_text(json.dumps({"type": "DSA_ED25519", "challenge": {"attrs": ["to"]}}))
    transaction = tmp_path / "tx.json"
    transaction.write_text("{}")

    args = ["-c", config_path, "approval", str(challenge), str(transaction)]
    assert cli.main(args) == 1
    assert "MalformedPayload" in capsys.readouterr().err

    assert cli.main(args + ["--allow-missing"]) == 0


def test_get(config_path, monkeypatch, capsys):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["X-SeedAuth-Key-Id"] == "key-1"
        return httpx.Response(200, json={"assets": []})

    monkeypatch.setattr(
        cli,
        "SeedAuthClient",
        lambda config: SeedAuthClient(config, transport=httpx.MockTransport(handler)),
    )

    assert cli.main(["-c", config_path, "get", "/v1/assets"]) == 0
    assert json.loads(capsys.readouterr().out) == {"assets": []}


def test_post(config_path, tmp_path, monkeypatch, capsys):
    body = tmp_path / "body.json"
    body.write_text('{"amount": "10"}')

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.content == b'{"amount": "10"}'
        return httpx.Response(200, json={"ok": True})

    monkeypatch.setattr(
        cli,
        "SeedAuthClient",
        lambda config: SeedAuthClient(config, transport=httpx.MockTransport(handler)),
    )

    assert cli.main(["-c", config_path, "post", "/v1/transfers", str(body)]) == 0
    assert json.loads(capsys.readouterr().out) == {"ok": True}


def test_missing_config(tmp_path, capsys):
    assert cli.main(["-c", str(tmp_path / "missing.json"), "pubkey"]) == 1
    assert "ConfigError" in capsys.readouterr().err


def test_missing_input_file(config_path, tmp_path, capsys):
    assert cli.main(["-c", config_path, "sign", str(tmp_path / "missing.bin")]) == 1
    assert "error:" in capsys.readouterr().err


def test_no_command():
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 2


@pytest.mark.parametrize("target", ["challenge", "transaction"])
def test_approval_non_utf8_input(config_path, tmp_path, capsys, target):
    files = {
        "challenge": tmp_path / "challenge.json",
        "transaction": tmp_path / "tx.json",
    }
    files["challenge"].write_text(
        json.dumps({"type": "DSA_ED25519", "challenge": {"attrs": ["amount"]}})
    )
    files["transaction"].write_text(json.dumps({"amount": "10"}))
    files[target].write_bytes(b'{"amount": "\xff"}')

    args = ["-c", config_path, "approval", str(files["challenge"]), str(files["transaction"])]
    assert cli.main(args) == 1
    assert "not valid UTF-8" in capsys.readouterr().err


def test_post_non_utf8_body(config_path, tmp_path, capsys):
    body = tmp_path / "body.json"
    body.write_bytes(b"\xff\xfe")

    assert cli.main(["-c", config_path, "post", "/v1/transfers", str(body)]) == 1
    assert "not valid UTF-8" in capsys.readouterr().err
