# storefront/utils/fields.py
# Presence for partial updates is structural: a key missing from the payload
# is UNSET, while falsy values (0, False, "") are real values.


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET = _Unset()


def pick(data: dict, key: str):
    return data[key] if key in data else UNSET


def is_set(value) -> bool:
    return value is not UNSET
