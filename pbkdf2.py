import logging
import struct

from keyedhash import HASHES, HMAC


__all__ = ['pbkdf2', 'PBKDF2', 'selftest', 'DEFAULT_ROUNDS',
           'PBKDF2Error', 'UnsupportedAlgorithm', 'InvalidParameter']

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10000

MAX_BLOCKS = 2**32-1


class PBKDF2Error(Exception):
    pass


class UnsupportedAlgorithm(PBKDF2Error, ValueError):
    def __init__(self, algorithm):
        self.algorithm = algorithm
        super().__init__('unsupported hash %r, must be one of %s'
                         % (algorithm, ', '.join(sorted(HASHES))))


class InvalidParameter(PBKDF2Error, ValueError):
    pass


def f(prf, password, salt, rounds, k):
    """Compute output block ``k`` (1-based) of the derived key."""
    U = prf.init(password).update(salt).digest(struct.pack('>I', k))
    result = bytearray(U)
    for i in range(1, rounds):
        U = prf.init(password).digest(U)
        for x in range(len(result)):
            result[x] ^= U[x]
    return bytes(result)


class PBKDF2:
    """PBKDF2 over any ``KeyedHash``.

    The keyed hash is re-keyed with the password for every PRF application
    and cleared when ``derive`` returns, so one engine may derive any number
    of keys in turn without keeping the last password. It is not safe to
    share an engine between threads.
    """

    def __init__(self, prf, rounds=DEFAULT_ROUNDS):
        if isinstance(rounds, bool) or not isinstance(rounds, int):
            raise InvalidParameter('rounds must be an integer, got %r' % (rounds,))
        if rounds < 1:
            raise InvalidParameter('rounds must be at least 1, got %d' % rounds)
        self.prf = prf
        self.rounds = rounds

    def derive(self, password, salt, length=None):
        check_bytes(password, 'password')
        check_bytes(salt, 'salt')
        digest_size = self.prf.digest_size
        if length is None:
            length = digest_size // 2
        elif isinstance(length, bool) or not isinstance(length, int):
            raise InvalidParameter('length must be an integer, got %r' % (length,))
        elif length < 0:
            raise InvalidParameter('length must not be negative, got %d' % length)

        if length > MAX_BLOCKS * digest_size:
            raise InvalidParameter('derived key too long')

        l = (length + digest_size - 1) // digest_size
        logger.debug('deriving %d bytes in %d block(s) of %d, %d round(s)',
                     length, l, digest_size, self.rounds)

        dk = bytearray(length)
        try:
            for k in range(1, l+1):
                start = (k - 1) * digest_size
                block = f(self.prf, password, salt, self.rounds, k)
                dk[start:start+digest_size] = block[:length - start]
        finally:
            self.prf.clear()
        return bytes(dk)


def check_bytes(value, what):
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidParameter('%s must be bytes, got %s'
                               % (what, type(value).__name__))


def to_bytes(value, what):
    if isinstance(value, str):
        return value.encode('utf-8')
    check_bytes(value, what)
    return bytes(value)


def normalize_hash_name(hash_name):
    """Map e.g. 'SHA-256' or ' sha 256 ' to the ``HASHES`` key 'sha256'."""
    if not isinstance(hash_name, str):
        raise UnsupportedAlgorithm(hash_name)
    name = ''.join(hash_name.split()).lower()
    if name.startswith('sha-'):
        name = 'sha' + name[4:]
    if name not in HASHES:
        raise UnsupportedAlgorithm(hash_name)
    return name


def pbkdf2(hash_name, password, salt, length=None, rounds=DEFAULT_ROUNDS):
    """Derive a key from ``password`` and ``salt`` with PBKDF2-HMAC.

    ``hash_name`` selects SHA-1, SHA-256 or SHA-512 and is matched ignoring
    case, whitespace and a hyphen after "sha". Text arguments are UTF-8
    encoded. ``length`` defaults to half the digest size.
    """
    digestmod = HASHES[normalize_hash_name(hash_name)]
    password = to_bytes(password, 'password')
    salt = to_bytes(salt, 'salt')
    return PBKDF2(HMAC(digestmod), rounds).derive(password, salt, length)


def selftest():
    expected = 'ae4d0c95af6b46d32d0adff928f06dd02a303f8ef3c251dfd6e2d85a95474c43'
    dk = pbkdf2('sha256', 'password', 'salt', 32, 2)
    return dk.hex() == expected


if __name__ == '__main__':
    assert selftest()

    assert pbkdf2('sha1', 'password', 'salt', 20, 1).hex() == \
        '0c60c80f961f0e71f3a9b524af6012062fe037a6'

    assert pbkdf2('sha1', 'pass\x00word', 'sa\x00lt', 16, 4096).hex() == \
        '56fa6aa75548099dcc37d7f03425e0c3'
