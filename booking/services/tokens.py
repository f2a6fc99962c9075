"""Short random ids for appointments and customers."""

import uuid


def generate_id(model, length: int = 9) -> str:
    """Random lowercase hex token not yet used as a primary key of `model`."""
    while True:
        token = uuid.uuid4().hex[:length]
        if not model.objects.filter(pk=token).exists():
            return token
