import random
import string

_BASE36 = string.digits + string.ascii_lowercase
_ALPHANUMERIC = string.ascii_uppercase + string.ascii_lowercase + string.digits


def base36_token(rng: random.Random, length: int = 9) -> str:
    return "".join(rng.choice(_BASE36) for _ in range(length))


def alphanumeric_token(rng: random.Random, length: int) -> str:
    return "".join(rng.choice(_ALPHANUMERIC) for _ in range(length))
