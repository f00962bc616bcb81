import random
import string


def make_id(length):
    characters = string.ascii_letters + string.digits
    return "".join(random.choice(characters) for _ in range(length))
