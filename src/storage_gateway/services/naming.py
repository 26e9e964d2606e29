"""Key naming for stored items.

Object store keys get a random prefix so two uploads of ``shoe.png`` never
collide. File share names are kept verbatim, so a second upload of
``terms.pdf`` replaces the first; callers rely on that.
"""

import uuid


def new_unique_token() -> str:
    """Random UUID4 string, also used for customer row keys."""
    return str(uuid.uuid4())


def object_key(file_name: str) -> str:
    return f"{new_unique_token()}_{file_name}"


def share_file_name(file_name: str) -> str:
    return file_name
