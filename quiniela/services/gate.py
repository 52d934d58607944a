from quiniela.errors import LockedError


class LockPolicy:
    """
    Guard for participant write paths.

    Must be consulted inside the store transaction that performs the
    write, so a concurrent lock toggle cannot slip between the check
    and the write.
    """

    def __init__(self, store):
        self.store = store

    def is_open(self):
        return not self.store.get_settings().predictions_locked

    def ensure_open(self):
        if not self.is_open():
            raise LockedError()
