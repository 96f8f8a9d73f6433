# This library is free software: you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License as published by the Free Software Foundation, either
# version 3 of the License, or (at your option) any later version.

# This library is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this library.  If not, see <http://www.gnu.org/licenses/> or <http://www.gnu.org/licenses/lgpl.txt>

import enum
import logging
from typing import Optional, Union

from Crypto.Cipher import DES
from Crypto.Hash import MD4

from .errors import MalformedInputError, PrimitiveUnavailableError, UnsupportedAlgorithmError

log = logging.getLogger("ntlm_encryptor")
log.addHandler(logging.NullHandler())

LM_MAGIC = b"KGS!@#$%"  # page 57 in [MS-NLMP]

CHALLENGE_LENGTH = 8
LM_PASSWORD_LENGTH = 14
P16_LENGTH = 16
P21_LENGTH = 21
P24_LENGTH = 24
MD4_LENGTH = 16
SESSION_KEY_LENGTH = P16_LENGTH + P24_LENGTH

# each DES key is expanded from 7 bytes of the secret
KEY_SOURCE_LENGTH = 7

"""
password encryption for the LanMan and NTLMv1 challenge/response schemes

Generates the values a client sends to prove knowledge of a password without
sending it: the 24-byte LanMan and NTLMv1 responses to a server challenge, the
16-byte MD4 password hash, and the 40-byte NTLMv1 session key.

References:
[MS-NLMP]: NT LAN Manager (NTLM) Authentication Protocol Specification
http://download.microsoft.com/download/a/e/6/ae6e4142-aa58-45c6-8dcf-a657e5900cd3/%5BMS-NLMP%5D.pdf

The NTLM Authentication Protocol and Security Support Provider
http://davenport.sourceforge.net/ntlm.html
"""


class Algorithm(enum.IntEnum):
    """Password encryption algorithms"""
    LANMAN = 0
    NTLM1 = 1
    NTLM2 = 2
    MD4 = 3


_ALGORITHM_NAMES = {
    Algorithm.LANMAN: "LanMan",
    Algorithm.NTLM1: "NTLMv1",
    Algorithm.NTLM2: "NTLMv2",
    Algorithm.MD4: "MD4",
}


def algorithm_name(alg) -> str:
    """Return the display name of an encryption algorithm, 'Unknown' if out of range"""
    try:
        return _ALGORITHM_NAMES[Algorithm(alg)]
    except ValueError:
        return "Unknown"


def _as_algorithm(alg) -> Algorithm:
    try:
        return Algorithm(alg)
    except ValueError as err:
        raise UnsupportedAlgorithmError("unknown encryption algorithm %r" % (alg,)) from err


def _block(value: Optional[bytes], what: str) -> bytes:
    """Return the first 8 bytes of a challenge or seed"""
    if value is None or len(value) < CHALLENGE_LENGTH:
        raise MalformedInputError("%s must be %d bytes, got %s" % (
            what, CHALLENGE_LENGTH, None if value is None else len(value)))
    return bytes(value[0:CHALLENGE_LENGTH])


def generate_key(data: bytes, offset: int = 0) -> bytes:
    """generate_key makes a 7-byte string into an 8-byte DES key.
        The 56 source bits are spread over the top 7 bits of each key byte,
        the low (parity) bit of every key byte is left clear.
        @param data
            secret to read the key from
        @param offset
            position of the 7 source bytes in data
        returns
            8-byte DES key
    """
    if offset < 0 or len(data) < offset + KEY_SOURCE_LENGTH:
        raise MalformedInputError("need %d key bytes at offset %d, have %d bytes" % (
            KEY_SOURCE_LENGTH, offset, len(data)))
    byt = data[offset:offset + KEY_SOURCE_LENGTH]

    key = (
        byt[0] >> 1,
        ((byt[0] & 0x01) << 6) | (byt[1] >> 2),
        ((byt[1] & 0x03) << 5) | (byt[2] >> 3),
        ((byt[2] & 0x07) << 4) | (byt[3] >> 4),
        ((byt[3] & 0x0F) << 3) | (byt[4] >> 5),
        ((byt[4] & 0x1F) << 2) | (byt[5] >> 6),
        ((byt[5] & 0x3F) << 1) | (byt[6] >> 7),
        byt[6] & 0x7F,
    )
    return bytes((k << 1) & 0xFF for k in key)


def _des_encrypt(key: bytes, block: bytes) -> bytes:
    # a fresh cipher object per block, they are never shared between calls
    try:
        dobj = DES.new(key, DES.MODE_ECB)
    except (ValueError, TypeError, OSError) as err:
        log.error("DES cipher unavailable: %s", err)
        raise PrimitiveUnavailableError("DES cipher unavailable: %s" % err) from err
    return dobj.encrypt(block)


def _md4(data: bytes) -> bytes:
    try:
        digest = MD4.new(data)
    except (ValueError, TypeError, OSError) as err:
        log.error("MD4 digest unavailable: %s", err)
        raise PrimitiveUnavailableError("MD4 digest unavailable: %s" % err) from err
    return digest.digest()


def _lm_password(passwd: Optional[str]) -> bytes:
    """uppercase the password and fix its length to 14 bytes"""
    passwd = (passwd or "").upper()[0:LM_PASSWORD_LENGTH]
    passwd += '\0' * (LM_PASSWORD_LENGTH - len(passwd))
    return passwd.encode('utf8')[0:LM_PASSWORD_LENGTH]


def _unicode_password(passwd: Optional[str]) -> bytes:
    # lone surrogates are kept as raw UTF-16 code units
    return (passwd or "").encode('utf-16le', 'surrogatepass')


def p16(passwd: Optional[str], seed: bytes = LM_MAGIC) -> bytes:
    """p16 DES encrypts the seed twice, under keys made from the two halves
        of the 14-byte uppercased password.
        @param passwd
            plaintext password, None is the empty password
        @param seed
            8-byte value to encrypt
        returns
            16-byte encrypted value
    """
    p14 = _lm_password(passwd)
    s8 = _block(seed, "seed")

    res = _des_encrypt(generate_key(p14, 0), s8)
    res += _des_encrypt(generate_key(p14, 7), s8)
    return res


def p24(p21: bytes, challenge: bytes) -> bytes:
    """p24 generates a 24-byte response given a 21-byte secret and the
        challenge from the server.
        @param p21
            21-byte password hash (zero padded)
        @param challenge
            8-byte challenge
        returns
            24-byte response
    """
    c8 = _block(challenge, "challenge")

    res = b''
    for offset in (0, 7, 14):
        res += _des_encrypt(generate_key(p21, offset), c8)
    return res


def lm_hash(passwd: Optional[str]) -> bytes:
    """create LanManager hashed password"""
    return p16(passwd, LM_MAGIC)


def nt_hash(passwd: Optional[str]) -> bytes:
    """create NT hashed password"""
    return _md4(_unicode_password(passwd))


def session_base_key(passwd: Optional[str]) -> bytes:
    """Gets the NTLM base key"""
    return _md4(nt_hash(passwd))


def _pad21(password_hash: bytes) -> bytes:
    # padding with zeros to make the hash 21 bytes long
    return password_hash + b'\0' * (P21_LENGTH - len(password_hash))


def encrypt_password(passwd: Optional[str], challenge: Optional[bytes], alg: Union[Algorithm, int]) -> bytes:
    """Encrypt a plaintext password for the given algorithm.

    LANMAN and NTLM1 return the 24-byte response to the challenge, MD4 returns
    the 16-byte password hash and ignores the challenge.

    :raises UnsupportedAlgorithmError: for NTLM2 or an unknown algorithm
    :raises MalformedInputError: if the challenge is shorter than 8 bytes
    :raises PrimitiveUnavailableError: if DES or MD4 cannot be constructed
    """
    alg = _as_algorithm(alg)
    log.debug("encrypting password using %s", algorithm_name(alg))

    if alg == Algorithm.LANMAN:
        return p24(_pad21(lm_hash(passwd)), challenge)
    if alg == Algorithm.NTLM1:
        return p24(_pad21(nt_hash(passwd)), challenge)
    if alg == Algorithm.MD4:
        return nt_hash(passwd)
    raise UnsupportedAlgorithmError("%s password encryption is not implemented" % algorithm_name(alg))


def generate_session_key(passwd: Optional[str], challenge: Optional[bytes], alg: Union[Algorithm, int]) -> bytes:
    """Generate the 40-byte session key: MD4(NT hash) followed by the NTLMv1 response.
    Only NTLM1 is supported.
    """
    alg = _as_algorithm(alg)
    if alg != Algorithm.NTLM1:
        raise UnsupportedAlgorithmError("no session key for %s" % algorithm_name(alg))
    log.debug("generating %s session key", algorithm_name(alg))

    sess_key = session_base_key(passwd) + encrypt_password(passwd, challenge, alg)
    assert SESSION_KEY_LENGTH == len(sess_key), "SESSION_KEY_LENGTH: %d != sess_key: %d" % \
                                                (SESSION_KEY_LENGTH, len(sess_key))
    return sess_key


if __name__ == "__main__":
    import sys
    from binascii import unhexlify


    def byte_to_hex(byte_str):
        """
        Convert a byte string to it's hex string representation e.g. for output.
        """
        return ' '.join(["%02X" % x for x in byte_str])


    def hex_to_byte(hex_str):
        """
        Convert a string hex byte values into a byte string. The Hex Byte values may
        or may not be space separated.
        """
        hex_str = ''.join(hex_str.split(" "))

        return unhexlify(hex_str)


    # [MS-NLMP] 4.2.1
    PASSWORD = sys.argv[1] if len(sys.argv) > 1 else "Password"
    SERVER_CHALLENGE = hex_to_byte(sys.argv[2] if len(sys.argv) > 2 else "01 23 45 67 89 ab cd ef")

    for ALG in Algorithm:
        try:
            print("%-8s %s" % (algorithm_name(ALG), byte_to_hex(encrypt_password(PASSWORD, SERVER_CHALLENGE, ALG))))
        except UnsupportedAlgorithmError as err:
            print("%-8s %s" % (algorithm_name(ALG), err))
    print("%-8s %s" % ("Session", byte_to_hex(generate_session_key(PASSWORD, SERVER_CHALLENGE, Algorithm.NTLM1))))
