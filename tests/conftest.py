"""Pytest fixtures"""
import pytest

from constants import SERVER_CHALLENGE, VECTORS
from ntlm_encryptor import encryptor


@pytest.fixture(name='challenge')
def fixture_challenge():
    """The 8-byte [MS-NLMP] server challenge"""
    return SERVER_CHALLENGE


@pytest.fixture(params=VECTORS, ids=lambda v: repr(v['password']), name='vector')
def fixture_vector(request):
    """One set of reference values for a password against the challenge"""
    return request.param


def _unavailable(*args, **kwargs):  # pylint:disable=unused-argument
    raise OSError("cannot load native module")


@pytest.fixture(name='broken_des')
def fixture_broken_des(monkeypatch):
    """Make the DES cipher impossible to construct, as on a runtime without it"""
    monkeypatch.setattr(encryptor.DES, 'new', _unavailable)


@pytest.fixture(name='broken_md4')
def fixture_broken_md4(monkeypatch):
    """Make the MD4 digest impossible to construct"""
    monkeypatch.setattr(encryptor.MD4, 'new', _unavailable)
