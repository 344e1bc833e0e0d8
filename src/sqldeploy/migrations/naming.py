"""
Migration naming convention.

A migration's identity is its file name: ``<revision> - <description>.sql``.
The same rule is applied to the ``description`` column of the changelog,
which stores that file name.
"""

import re

from sqldeploy.exceptions import MalformedNameError

REVISION_PATTERN = re.compile(r"^([0-9]+) - (.*)$")

# Section delimiter used by dbdeploy-style undo scripts, which are not supported
UNDO_MARKER = "--//@UNDO"


def parse_revision(name: str) -> int:
    """
    Extract the revision number from a migration file name.

    Args:
        name: File base name (or stored changelog description)

    Returns:
        Revision as an int, so ordering is numeric ("10" after "9")

    Raises:
        MalformedNameError: If the name does not follow the convention
    """
    match = REVISION_PATTERN.match(name)
    if match is None:
        raise MalformedNameError(name)
    return int(match.group(1))
