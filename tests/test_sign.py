import pytest

from kdt import encoding
from kdt.errors import EnvelopeFormatError, SigningError
from kdt.sign import SignedEnvelope, sign, verify, verify_armored


@pytest.fixture(scope="module")
def signed(alice) -> SignedEnvelope:
    return sign("This is a test message", alice.private.signing_private_key, alice.public.signing_public_key)


def test_sign_and_verify(alice, signed):
    assert signed.message == "This is a test message"
    assert verify(signed.message, signed.signature, alice.public.signing_public_key)


def test_signature_covers_message(alice, signed):
    assert not verify("This is a test messagf", signed.signature, alice.public.signing_public_key)


def test_signature_bytes_are_checked(alice, signed):
    flipped = bytes([signed.signature[0] ^ 0x01]) + signed.signature[1:]
    assert not verify(signed.message, flipped, alice.public.signing_public_key)


def test_other_public_key_rejects(bob, signed):
    assert not verify(signed.message, signed.signature, bob.public.signing_public_key)


def test_malformed_inputs_are_invalid_not_errors(alice, signed):
    assert not verify(signed.message, b"short", alice.public.signing_public_key)
    assert not verify(signed.message, signed.signature, b"short")


def test_mismatched_keypair_refuses_to_sign(alice, bob):
    with pytest.raises(SigningError):
        sign("hello", alice.private.signing_private_key, bob.public.signing_public_key)


@pytest.mark.parametrize("message", ["", "  padded  ", "multi\n\nline\n", "署名 ✓"])
def test_armored_round_trip(alice, message):
    armored = sign(message, alice.private.signing_private_key, alice.public.signing_public_key).to_armor()
    restored = SignedEnvelope.from_armor(armored)
    assert restored.message == message
    assert verify_armored(armored, alice.public.signing_public_key)


def test_armored_tampered_message(alice, signed):
    armored = signed.to_armor().replace("test message", "test massage")
    assert not verify_armored(armored, alice.public.signing_public_key)


def test_armored_signature_is_wrapped(signed):
    armored = signed.to_armor()
    sig_lines = armored.split("-----BEGIN KDT SIGNATURE-----\n")[1].split("\n")[:-1]
    assert "".join(sig_lines) == encoding.encode(signed.signature)
    assert all(len(line) <= 64 for line in sig_lines)


def test_armored_garbage_signature_is_invalid(alice, signed):
    armored = signed.to_armor()
    head, _, _ = armored.partition("-----BEGIN KDT SIGNATURE-----\n")
    broken = head + "-----BEGIN KDT SIGNATURE-----\n!!!notbase64!!!\n-----END KDT SIGNATURE-----"
    assert not verify_armored(broken, alice.public.signing_public_key)


def test_armored_missing_markers_raise(alice):
    with pytest.raises(EnvelopeFormatError):
        verify_armored("just some text", alice.public.signing_public_key)


def test_backend_load_failure_is_typed(alice, signed, backend_unavailable):
    with pytest.raises(SigningError):
        sign("hello", alice.private.signing_private_key, alice.public.signing_public_key)
    assert not verify(signed.message, signed.signature, alice.public.signing_public_key)
