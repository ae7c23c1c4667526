import io
import re

import pytest

from kdt import cli, database


def run(monkeypatch, capsys, argv, stdin=""):
    monkeypatch.setattr("sys.stdin", io.StringIO(stdin))
    cli.main(argv)
    return capsys.readouterr()


def test_generate_list_and_export(monkeypatch, capsys, db_file):
    out = run(monkeypatch, capsys, ["--db", db_file, "--gen-key"], "Alice\n")
    private_id = re.search(r"private id ([0-9A-F]{64})", out.err).group(1)

    out = run(monkeypatch, capsys, ["--db", db_file, "-l"])
    assert f"ID: {private_id}\nOwner: Alice" in out.out

    out = run(monkeypatch, capsys, ["--db", db_file, "--export-pubkey", private_id])
    assert out.out.startswith("-----BEGIN KDT PUBKEY BLOCK-----\n")


def test_empty_name_gets_placeholder(monkeypatch, capsys, db_file):
    run(monkeypatch, capsys, ["--db", db_file, "-g"], "\n")
    keyset = database.load_owned_keys(db_file)[0]
    assert keyset.owner == cli.ANONYMOUS_OWNER


def test_full_exchange(monkeypatch, capsys, tmp_path):
    alice_db = str(tmp_path / "alice.sqlite")
    bob_db = str(tmp_path / "bob.sqlite")

    out = run(monkeypatch, capsys, ["--db", alice_db, "-g"], "Alice")
    alice_private = re.search(r"private id ([0-9A-F]{64})", out.err).group(1)
    exported = run(monkeypatch, capsys, ["--db", alice_db, "--export-pubkey", alice_private]).out

    out = run(monkeypatch, capsys, ["--db", bob_db, "-i"], exported)
    alice_public = re.search(r"id `([0-9A-F]{64})`", out.err).group(1)

    ciphertext = run(monkeypatch, capsys, ["--db", bob_db, "-e", alice_public], "hello\n").out
    assert "-----BEGIN KDT MESSAGE-----" in ciphertext

    plaintext = run(monkeypatch, capsys, ["--db", alice_db, "-d", alice_private], ciphertext).out
    assert plaintext == "hello\n"

    signed = run(monkeypatch, capsys, ["--db", alice_db, "-s", alice_private], "signed by alice").out
    out = run(monkeypatch, capsys, ["--db", bob_db, "-v", alice_public], signed)
    assert "(success) The provided message is valid!" in out.err

    out = run(monkeypatch, capsys, ["--db", bob_db, "-v", alice_public], signed.replace("alice", "mallory"))
    assert "(warn) The given message is not valid!" in out.err


def test_duplicate_import_is_fatal(monkeypatch, capsys, db_file, alice):
    run(monkeypatch, capsys, ["--db", db_file, "-i"], alice.public.to_armor())
    with pytest.raises(SystemExit) as exc:
        run(monkeypatch, capsys, ["--db", db_file, "-i"], alice.public.to_armor())
    assert exc.value.code == 1
    assert "(FATAL) This key already exists" in capsys.readouterr().err


def test_unknown_id_is_fatal(monkeypatch, capsys, db_file):
    with pytest.raises(SystemExit) as exc:
        run(monkeypatch, capsys, ["--db", db_file, "-e", "0" * 64], "hello")
    assert exc.value.code == 1


def test_failed_operation_does_not_persist(monkeypatch, capsys, db_file, alice):
    run(monkeypatch, capsys, ["--db", db_file, "-i"], alice.public.to_armor())
    with pytest.raises(SystemExit):
        run(monkeypatch, capsys, ["--db", db_file, "-i"], "garbage")
    assert database.load_public_keys(db_file) == [alice.public]


def test_delete_pubkey(monkeypatch, capsys, db_file, alice):
    run(monkeypatch, capsys, ["--db", db_file, "-i"], alice.public.to_armor())
    run(monkeypatch, capsys, ["--db", db_file, "--del-pubkey", alice.public.id])
    assert database.load_public_keys(db_file) == []


def test_list_keys_when_empty_is_fatal(monkeypatch, capsys, db_file):
    with pytest.raises(SystemExit) as exc:
        run(monkeypatch, capsys, ["--db", db_file, "--list-keys"])
    assert exc.value.code == 1
    assert "You don't have any public keys!" in capsys.readouterr().err


def test_two_actions_are_rejected(monkeypatch, capsys, db_file):
    with pytest.raises(SystemExit) as exc:
        run(monkeypatch, capsys, ["--db", db_file, "-g", "--list-keys"])
    assert exc.value.code == 2


def test_no_action_is_rejected(monkeypatch, capsys, db_file):
    with pytest.raises(SystemExit) as exc:
        run(monkeypatch, capsys, ["--db", db_file])
    assert exc.value.code == 2


def test_backend_failure_is_reported_not_raised(monkeypatch, capsys, db_file, backend_unavailable):
    with pytest.raises(SystemExit) as exc:
        run(monkeypatch, capsys, ["--db", db_file, "-g"], "Alice")
    assert exc.value.code == 1
    assert "(FATAL) Failed to generate" in capsys.readouterr().err
    assert database.load_owned_keys(db_file) == []
