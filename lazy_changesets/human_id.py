"""Human-readable changeset identifiers.

Ids are coolname slugs such as ``brave-electric-otter``. They only need to
be unlikely to collide within one ``.changeset`` directory, so there is no
check against existing files.
"""

from __future__ import annotations

import coolname


def human_id(separator: str = "-") -> str:
    """Return a random three-word lowercase identifier."""
    return separator.join(coolname.generate(3))
