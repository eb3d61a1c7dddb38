import abc
import hashlib
import hmac


__all__ = ['KeyedHash', 'HMAC', 'HASHES']


HASHES = {
    'sha1': hashlib.sha1,
    'sha256': hashlib.sha256,
    'sha512': hashlib.sha512,
}


class KeyedHash(abc.ABC):
    """A keyed pseudorandom function usable by the PBKDF2 engine.

    ``init`` sets the key, ``update`` feeds message bytes and ``digest``
    finalizes. After ``digest`` the message is cleared but the key is kept,
    so the instance can produce another digest without being re-keyed.
    """

    digest_size = None

    @abc.abstractmethod
    def init(self, key):
        """(Re)key the function, dropping any pending message. Returns self."""

    @abc.abstractmethod
    def update(self, msg=b''):
        """Feed message bytes. Returns self."""

    @abc.abstractmethod
    def digest(self, msg=None):
        """Feed ``msg`` if given, then return ``digest_size`` bytes."""

    def clear(self):
        """Forget the key. The next use needs ``init`` again."""


class HMAC(KeyedHash):
    """HMAC over a hashlib constructor."""

    def __init__(self, digestmod):
        self.digestmod = digestmod
        h = digestmod()
        self.digest_size = h.digest_size
        self.name = 'hmac-' + h.name
        self._keyed = None
        self._mac = None

    def init(self, key):
        self._keyed = hmac.new(key, digestmod=self.digestmod)
        self._mac = self._keyed.copy()
        return self

    def update(self, msg=b''):
        if self._mac is None:
            raise ValueError('%s used before init()' % self.name)
        self._mac.update(msg)
        return self

    def digest(self, msg=None):
        if msg is not None:
            self.update(msg)
        elif self._mac is None:
            raise ValueError('%s used before init()' % self.name)
        out = self._mac.digest()
        self._mac = self._keyed.copy()
        return out

    def clear(self):
        self._keyed = None
        self._mac = None

    def __repr__(self):
        return '<%s digest_size=%d>' % (self.name, self.digest_size)
