"""DES key expansion and the P16/P24 building blocks"""
import pytest

from constants import KEYS, MSNLMP, PASSWORDS
from ntlm_encryptor import encryptor
from ntlm_encryptor.errors import MalformedInputError


@pytest.mark.parametrize('source,expected', KEYS)
def test_generate_key(source, expected):
    assert encryptor.generate_key(source) == expected


def test_generate_key_offset():
    """The key is read from the 7 bytes at the offset, the rest is ignored"""
    data = b'\x11' * 3 + b'PASSWOR' + b'\x22' * 4
    assert encryptor.generate_key(data, 3) == encryptor.generate_key(b'PASSWOR')


@pytest.mark.parametrize('data', [bytes(range(21)), b'\xff' * 21, MSNLMP['nt_hash'] + b'\0' * 5])
def test_generate_key_low_bit_clear(data):
    for offset in (0, 7, 14):
        key = encryptor.generate_key(data, offset)
        assert len(key) == 8
        assert all(b & 0x01 == 0 for b in key)
        assert key == encryptor.generate_key(data, offset)


@pytest.mark.parametrize('data,offset', [(b'', 0), (b'123456', 0), (b'\0' * 16, 14), (b'\0' * 21, -1)])
def test_generate_key_short_input(data, offset):
    with pytest.raises(MalformedInputError):
        encryptor.generate_key(data, offset)


def test_p16_is_lm_hash():
    assert encryptor.p16(MSNLMP['password'], b"KGS!@#$%") == MSNLMP['lm_hash']
    assert encryptor.p16(MSNLMP['password']) == MSNLMP['lm_hash']


def test_p16_case_insensitive():
    assert encryptor.p16("password") == encryptor.p16("PASSWORD") == encryptor.p16("PassWord")


def test_p16_truncates_to_14_characters():
    assert encryptor.p16("abcdefghijklmnXYZ") == encryptor.p16("ABCDEFGHIJKLMN")
    assert encryptor.p16("abcdefghijklmnXYZ") != encryptor.p16("ABCDEFGHIJKLM")


def test_p16_none_is_empty():
    assert encryptor.p16(None) == encryptor.p16("")


@pytest.mark.parametrize('passwd', PASSWORDS)
def test_p16_length(passwd):
    assert len(encryptor.p16(passwd)) == encryptor.P16_LENGTH


def test_p16_short_seed():
    with pytest.raises(MalformedInputError):
        encryptor.p16("Password", b"KGS!")


def test_p24(challenge):
    p21 = MSNLMP['nt_hash'] + b'\0' * 5
    assert encryptor.p24(p21, challenge) == MSNLMP['nt_response']


def test_p24_uses_first_8_challenge_bytes(challenge):
    p21 = MSNLMP['nt_hash'] + b'\0' * 5
    assert encryptor.p24(p21, challenge + b'\xaa' * 8) == encryptor.p24(p21, challenge)


def test_p24_short_secret(challenge):
    """A 16-byte secret cannot supply the third key"""
    with pytest.raises(MalformedInputError):
        encryptor.p24(MSNLMP['nt_hash'], challenge)


@pytest.mark.parametrize('challenge', [None, b'', b'\x01\x23\x45\x67\x89\xab\xcd'])
def test_p24_short_challenge(challenge):
    with pytest.raises(MalformedInputError):
        encryptor.p24(b'\0' * 21, challenge)
