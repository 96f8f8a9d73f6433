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

"""Exceptions raised while encrypting passwords"""


class NtlmEncryptorError(Exception):
    """Base class for all password encryption failures"""


class PrimitiveUnavailableError(NtlmEncryptorError):
    """The DES cipher or the MD4 digest could not be constructed"""


class UnsupportedAlgorithmError(NtlmEncryptorError, ValueError):
    """Unknown algorithm, NTLMv2, or a session key requested for anything but NTLMv1"""


class MalformedInputError(NtlmEncryptorError, ValueError):
    """Challenge, seed or key material too short for the requested operation"""
