"""
Unit tests for personal_sign signature verification.

Covers message construction, recovery, v normalization,
malformed input and tamper sensitivity.
"""

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import keccak

from conftest import ADDRESS_A, ADDRESS_B, KEY_A, KEY_B, sign
from walletauth.errors import AddressMismatch, MalformedSignature, RecoveryFailed, VerificationError
from walletauth.models import RecoveredIdentity, SignatureClaim
from walletauth.signature_verifier import (
    personal_message_bytes,
    personal_message_hash,
    recover_address,
    split_signature,
    verify,
)


def _flip_bit(data: bytes, index: int, bit: int = 0) -> bytes:
    out = bytearray(data)
    out[index] ^= 1 << bit
    return bytes(out)


class TestPersonalMessage:
    """Pre-image the wallet actually signs."""

    def test_message_bytes_for_known_challenge(self, challenge):
        assert personal_message_bytes(challenge) == b"\x19Ethereum Signed Message:\n10abcdeFGHIJ"

    def test_message_bytes_match_eth_account_encoding(self, challenge):
        signable = encode_defunct(text=challenge)
        expected = b"\x19" + signable.version + signable.header + signable.body
        assert personal_message_bytes(challenge) == expected
        assert personal_message_hash(challenge) == keccak(expected)

    def test_length_is_byte_length_not_char_length(self):
        assert personal_message_bytes("é").endswith(b"\n2" + "é".encode("utf-8"))

    def test_long_challenge_has_no_leading_zeros(self):
        assert personal_message_bytes("a" * 123).startswith(b"\x19Ethereum Signed Message:\n123a")


class TestVerify:
    """End-to-end verification against eth_account signatures."""

    def test_known_key_recovers_well_known_address(self, challenge, signature_a):
        identity = verify(challenge, SignatureClaim(claimed_address=ADDRESS_A, signature=signature_a))

        assert identity == RecoveredIdentity(address=ADDRESS_A)

    def test_recovered_address_matches_reference_derivation(self, challenge, signature_a):
        reference = Account.from_key(KEY_A).address.lower()
        assert recover_address(challenge, signature_a) == reference

    def test_recover_address_accepts_hex(self, challenge, signature_a):
        assert recover_address(challenge, "0x" + signature_a.hex()) == ADDRESS_A

    def test_hex_signature_with_and_without_prefix(self, challenge, signature_a):
        for sig in ("0x" + signature_a.hex(), signature_a.hex()):
            identity = verify(challenge, SignatureClaim(claimed_address=ADDRESS_A, signature=sig))
            assert identity.address == ADDRESS_A

    def test_checksummed_claim_is_accepted(self, challenge, signature_a):
        checksummed = Account.from_key(KEY_A).address
        assert checksummed != checksummed.lower()

        identity = verify(challenge, SignatureClaim(claimed_address=checksummed, signature=signature_a))
        assert identity.address == ADDRESS_A

    def test_random_challenges_round_trip(self):
        for challenge in ("x", "Hello wallet", "QwErTyUiOp" * 5):
            sig = sign(challenge, KEY_B)
            assert verify(challenge, SignatureClaim(ADDRESS_B, sig)).address == ADDRESS_B

    def test_signature_from_other_key_is_mismatch(self, challenge):
        sig_b = sign(challenge, KEY_B)
        with pytest.raises(AddressMismatch):
            verify(challenge, SignatureClaim(claimed_address=ADDRESS_A, signature=sig_b))

    def test_non_ascii_claim_is_mismatch(self, challenge, signature_a):
        with pytest.raises(AddressMismatch):
            verify(challenge, SignatureClaim(claimed_address="0x\u00e9\u00e9", signature=signature_a))

    def test_missing_claimed_address(self, challenge, signature_a):
        with pytest.raises(MalformedSignature):
            verify(challenge, SignatureClaim(claimed_address="", signature=signature_a))


class TestRecoveryId:
    """v normalization and strict recovery id."""

    def test_v_zero_one_and_27_28_verify_identically(self, challenge, signature_a):
        v = signature_a[64]
        assert v in (27, 28)
        compact = signature_a[:64] + bytes([v - 27])

        a = verify(challenge, SignatureClaim(ADDRESS_A, signature_a))
        b = verify(challenge, SignatureClaim(ADDRESS_A, compact))
        assert a == b

    def test_split_signature_normalizes_v(self, signature_a):
        v, r, s = split_signature(signature_a[:64] + b"\x01")
        assert v == 28
        assert r == int.from_bytes(signature_a[:32], "big")
        assert s == int.from_bytes(signature_a[32:64], "big")

    @pytest.mark.parametrize("v", [2, 26, 29, 255])
    def test_out_of_range_v_is_malformed(self, challenge, signature_a, v):
        with pytest.raises(MalformedSignature):
            verify(challenge, SignatureClaim(ADDRESS_A, signature_a[:64] + bytes([v])))

    def test_other_recovery_id_is_not_tried(self, challenge, signature_a):
        # 27 <-> 28 selects the other candidate key; it must not fall back
        swapped = signature_a[:64] + bytes([55 - signature_a[64]])
        with pytest.raises((AddressMismatch, RecoveryFailed)):
            verify(challenge, SignatureClaim(ADDRESS_A, swapped))


class TestMalformedSignature:
    @pytest.mark.parametrize("length", [0, 1, 64, 66, 130])
    def test_wrong_length(self, challenge, length):
        with pytest.raises(MalformedSignature):
            verify(challenge, SignatureClaim(ADDRESS_A, b"\x01" * length))

    @pytest.mark.parametrize("sig", ["0xzz", "not-hex", "0x" + "ab" * 64, "abc"])
    def test_bad_hex(self, challenge, sig):
        with pytest.raises(MalformedSignature):
            verify(challenge, SignatureClaim(ADDRESS_A, sig))

    def test_r_out_of_range_fails_recovery(self, challenge, signature_a):
        bad = b"\xff" * 32 + signature_a[32:]
        with pytest.raises(RecoveryFailed):
            verify(challenge, SignatureClaim(ADDRESS_A, bad))

    def test_zero_r_and_s_fail_recovery(self, challenge):
        with pytest.raises(RecoveryFailed):
            verify(challenge, SignatureClaim(ADDRESS_A, b"\x00" * 64 + b"\x1b"))


class TestTamperSensitivity:
    """A single flipped bit must never verify."""

    @pytest.mark.parametrize("index", [0, 7, 15, 31])
    @pytest.mark.parametrize("bit", [0, 3, 7])
    def test_flip_bit_in_r(self, challenge, signature_a, index, bit):
        tampered = _flip_bit(signature_a, index, bit)
        with pytest.raises((RecoveryFailed, AddressMismatch)):
            verify(challenge, SignatureClaim(ADDRESS_A, tampered))

    @pytest.mark.parametrize("index", [32, 40, 50, 63])
    @pytest.mark.parametrize("bit", [0, 3, 7])
    def test_flip_bit_in_s(self, challenge, signature_a, index, bit):
        tampered = _flip_bit(signature_a, index, bit)
        with pytest.raises((RecoveryFailed, AddressMismatch)):
            verify(challenge, SignatureClaim(ADDRESS_A, tampered))

    def test_flip_bit_in_challenge(self, challenge, signature_a):
        for i in range(len(challenge)):
            tampered = challenge[:i] + chr(ord(challenge[i]) ^ 0x20) + challenge[i + 1:]
            with pytest.raises(VerificationError):
                verify(tampered, SignatureClaim(ADDRESS_A, signature_a))
